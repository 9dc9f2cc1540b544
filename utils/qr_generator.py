import base64
import io
import logging
from dataclasses import dataclass
from typing import Protocol

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image, ImageColor

from settings_store import load_settings


logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


class EncodingError(Exception):
    """The payload cannot be turned into a QR code."""


@dataclass(frozen=True)
class EncodingOptions:
    error_correction: str = "H"
    width: int = 512
    margin: int = 2
    fill_color: str = "black"
    back_color: str = "white"

    def __post_init__(self):
        if self.error_correction not in ERROR_CORRECTION_LEVELS:
            raise ValueError(
                f"Unknown error correction level {self.error_correction!r}; use one of L, M, Q, H"
            )
        if self.width <= 0:
            raise ValueError("QR width must be a positive number of pixels")
        if self.margin < 0:
            raise ValueError("QR margin cannot be negative")
        for color in (self.fill_color, self.back_color):
            if isinstance(color, str):
                # Raises ValueError for names Pillow cannot draw with.
                ImageColor.getrgb(color)

    @classmethod
    def from_settings(cls, settings):
        return cls(
            error_correction=str(settings.get("error_correction", "H")).upper(),
            width=int(settings.get("qr_width", 512)),
            margin=int(settings.get("qr_margin", 2)),
            fill_color=settings.get("fill_color", "black"),
            back_color=settings.get("back_color", "white"),
        )


@dataclass(frozen=True)
class QrImage:
    png: bytes
    width: int

    @property
    def data_url(self) -> str:
        """Return the image as a ``data:`` URL for embedding in HTML."""
        return "data:image/png;base64," + base64.b64encode(self.png).decode("utf-8")


class QrEncoder(Protocol):
    """Anything that can render a payload string as a QR image."""

    def encode(self, payload: str, options: EncodingOptions) -> QrImage:
        """Render *payload*, raising :class:`EncodingError` if it does not fit."""


class PngQrEncoder:
    """QR encoder backed by the ``qrcode`` package and Pillow."""

    def encode(self, payload: str, options: EncodingOptions) -> QrImage:
        if not payload:
            raise EncodingError("Cannot encode an empty payload")

        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECTION_LEVELS[options.error_correction],
            border=options.margin,
        )
        qr.add_data(payload)
        try:
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as exc:
            # qrcode 8 reports overflow as an out-of-range version (ValueError).
            raise EncodingError(
                f"Payload of {len(payload)} characters exceeds QR capacity "
                f"at error correction level {options.error_correction}"
            ) from exc

        modules = qr.modules_count + 2 * options.margin
        qr.box_size = max(1, options.width // modules)

        qr_img = qr.make_image(
            fill_color=options.fill_color,
            back_color=options.back_color,
        ).convert("RGB")
        if qr_img.width != options.width:
            qr_img = qr_img.resize((options.width, options.width), Image.Resampling.NEAREST)

        buffer = io.BytesIO()
        qr_img.save(buffer, format="PNG")
        logger.debug(
            "Encoded %d characters as version %d QR (%d px)",
            len(payload),
            qr.version,
            options.width,
        )
        return QrImage(png=buffer.getvalue(), width=options.width)


def generate_qr(data: str, options: EncodingOptions = None) -> QrImage:
    """Generate a QR code image for *data*.

    When *options* is omitted they are read from the saved application
    settings.
    """
    if options is None:
        options = EncodingOptions.from_settings(load_settings())
    return PngQrEncoder().encode(data, options)
