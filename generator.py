"""
Mode dispatch: validate a form, build its payload and hand it to the encoder.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from forms import validate_form
from utils.qr_generator import EncodingError, EncodingOptions, QrEncoder, QrImage
from utils.vcard import create_vcard


logger = logging.getLogger(__name__)

FAILURE_TITLE = "QR Generation Failed"
FAILURE_DESCRIPTION = "Could not generate QR code. Please try again."


class Mode(Enum):
    URL = "url"
    TEXT = "text"
    CONTACT = "vcard"


MODE_LABELS = {
    Mode.URL: "URL",
    Mode.TEXT: "Text",
    Mode.CONTACT: "Contact",
}


@dataclass(frozen=True)
class QrResult:
    payload: str
    image: QrImage


@dataclass(frozen=True)
class Notice:
    title: str
    description: str


@dataclass
class Submission:
    field_errors: Dict[str, str] = field(default_factory=dict)
    notice: Optional[Notice] = None
    result: Optional[QrResult] = None

    @property
    def ok(self):
        return self.result is not None


def build_payload(mode, form, escape_vcard=True):
    mode = Mode(mode)
    if mode is Mode.URL:
        return form.url
    if mode is Mode.TEXT:
        return form.text
    return create_vcard(form.to_record(), escape=escape_vcard)


class QrGenerator:
    """Turns form submissions into QR images, remembering the latest one."""

    def __init__(self, encoder: QrEncoder, options: EncodingOptions = None, escape_vcard=True):
        self.encoder = encoder
        self.options = options or EncodingOptions()
        self.escape_vcard = escape_vcard
        self.last_result: Optional[QrResult] = None

    def submit(self, mode, values) -> Submission:
        mode = Mode(mode)
        form, errors = validate_form(mode.value, values)
        if errors:
            logger.info("Rejected %s submission: %s", mode.value, ", ".join(sorted(errors)))
            return Submission(field_errors=errors)

        payload = build_payload(mode, form, escape_vcard=self.escape_vcard)
        logger.debug("Encoding %s payload: %r", mode.value, payload)

        try:
            image = self.encoder.encode(payload, self.options)
        except EncodingError as exc:
            logger.warning("QR encoding failed for %s payload: %s", mode.value, exc)
            return Submission(notice=Notice(FAILURE_TITLE, FAILURE_DESCRIPTION))

        self.last_result = QrResult(payload=payload, image=image)
        logger.info("Generated %s QR code from %d characters", mode.value, len(payload))
        return Submission(result=self.last_result)
