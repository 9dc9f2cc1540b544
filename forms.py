"""
Input schemas for the three generator modes.

Each mode validates independently; a failed validation is flattened into a
``{field: message}`` mapping so the page can show the message under the field.
"""

from pydantic import AnyUrl, BaseModel, ConfigDict, EmailStr, TypeAdapter, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from utils.vcard import ContactRecord


_url_adapter = TypeAdapter(AnyUrl)
_email_adapter = TypeAdapter(EmailStr)


def _is_url(value):
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _is_email(value):
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


class UrlForm(BaseModel):
    model_config = ConfigDict(validate_default=True)

    url: str = ""

    @field_validator("url")
    @classmethod
    def url_must_parse(cls, value):
        if not _is_url(value):
            raise PydanticCustomError("url", "Please enter a valid URL.")
        return value


class TextForm(BaseModel):
    model_config = ConfigDict(validate_default=True)

    text: str = ""

    @field_validator("text")
    @classmethod
    def text_not_empty(cls, value):
        if not value:
            raise PydanticCustomError("text_empty", "Text cannot be empty.")
        return value


class ContactForm(BaseModel):
    model_config = ConfigDict(validate_default=True)

    prefix: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    job_title: str = ""
    street: str = ""
    city: str = ""
    region: str = ""
    postcode: str = ""
    country: str = ""
    website: str = ""

    @field_validator("first_name")
    @classmethod
    def first_name_required(cls, value):
        if not value:
            raise PydanticCustomError("required", "First name is required")
        return value

    @field_validator("phone")
    @classmethod
    def phone_required(cls, value):
        if not value:
            raise PydanticCustomError("required", "Phone number is required")
        return value

    @field_validator("email")
    @classmethod
    def email_well_formed(cls, value):
        # Blank means "not given".
        if value and not _is_email(value):
            raise PydanticCustomError("email", "Invalid email address")
        return value

    @field_validator("website")
    @classmethod
    def website_well_formed(cls, value):
        if value and not _is_url(value):
            raise PydanticCustomError("url", "Invalid URL")
        return value

    def to_record(self):
        return ContactRecord(**self.model_dump())


FORM_FIELDS = {
    "url": [
        ("url", "Website URL", "https://example.com", True),
    ],
    "text": [
        ("text", "Plain Text", "Enter any text here...", True),
    ],
    "vcard": [
        ("prefix", "Prefix", "Mr./Dr.", False),
        ("first_name", "First Name", "John", True),
        ("last_name", "Last Name", "Doe", False),
        ("email", "Email", "john.doe@email.com", False),
        ("phone", "Phone", "+1 123 456 7890", True),
        ("company", "Organization", "ACME Inc.", False),
        ("job_title", "Job Title", "Manager", False),
        ("street", "Street", "123 Main St", False),
        ("city", "City", "Anytown", False),
        ("region", "Region", "State / Province", False),
        ("postcode", "Postcode", "Zip / Postal", False),
        ("country", "Country", "Country", False),
        ("website", "Website", "https://acme.inc", False),
    ],
}

FORM_SCHEMAS = {
    "url": UrlForm,
    "text": TextForm,
    "vcard": ContactForm,
}


def clean_values(mode, values):
    """Keep only the fields the mode knows about, with ``None`` as empty."""
    fields = [field for field, _, _, _ in FORM_FIELDS[mode]]
    return {field: "" if values.get(field) is None else str(values[field]) for field in fields}


def validate_form(mode, values):
    """Validate *values* for *mode*.

    Returns ``(form, errors)``; exactly one of them is meaningful: ``form`` is
    ``None`` when ``errors`` is non-empty.
    """
    if mode not in FORM_SCHEMAS:
        raise ValueError(f"Unknown generator mode: {mode!r}")

    try:
        form = FORM_SCHEMAS[mode](**clean_values(mode, values))
    except ValidationError as exc:
        errors = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "__root__"
            errors.setdefault(field, error["msg"])
        return None, errors
    return form, {}
