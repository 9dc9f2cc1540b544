"""Contact card serialization.

Turns a :class:`ContactRecord` into a vCard 3.0 text block that phone cameras
recognise as "add contact" when scanned from a QR code.
"""

from dataclasses import dataclass
from typing import Optional


ADDRESS_FIELDS = ("street", "city", "region", "postcode", "country")


@dataclass(frozen=True)
class ContactRecord:
    first_name: str
    prefix: Optional[str] = ""
    last_name: Optional[str] = ""
    phone: Optional[str] = ""
    email: Optional[str] = ""
    company: Optional[str] = ""
    job_title: Optional[str] = ""
    street: Optional[str] = ""
    city: Optional[str] = ""
    region: Optional[str] = ""
    postcode: Optional[str] = ""
    country: Optional[str] = ""
    website: Optional[str] = ""


def escape_text(value: str) -> str:
    """Escape a vCard 3.0 text value (backslash, semicolon, comma, newline)."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", r"\;")
        .replace(",", r"\,")
        .replace("\r\n", r"\n")
        .replace("\r", r"\n")
        .replace("\n", r"\n")
    )


def create_vcard(record: ContactRecord, escape: bool = True) -> str:
    """Return the vCard 3.0 text for *record*.

    Optional fields that are empty (or ``None``) are left out: their property
    line is skipped, or their slot in ``N``/``ADR`` is left blank.  With
    ``escape=False`` values are written verbatim, which yields a malformed card
    when they contain ``;``, ``,``, ``\\`` or line breaks.
    """

    def text(value):
        value = value or ""
        return escape_text(value) if escape else value

    prefix = text(record.prefix)
    first_name = text(record.first_name)
    last_name = text(record.last_name)

    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"N:{last_name};{first_name};;{prefix};",
        "FN:" + " ".join(part for part in (prefix, first_name, last_name) if part),
    ]

    if record.company:
        lines.append(f"ORG:{text(record.company)}")
    if record.job_title:
        lines.append(f"TITLE:{text(record.job_title)}")
    if record.phone:
        lines.append(f"TEL;TYPE=WORK,VOICE:{record.phone}")
    if record.email:
        lines.append(f"EMAIL:{text(record.email)}")

    address = [getattr(record, field) for field in ADDRESS_FIELDS]
    if any(address):
        # PO box and extended address are never collected.
        parts = ["", ""] + [text(part) for part in address]
        lines.append("ADR;TYPE=WORK:" + ";".join(parts))

    if record.website:
        lines.append(f"URL:{record.website}")

    lines.append("END:VCARD")
    return "\n".join(lines)
