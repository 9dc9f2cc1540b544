"""Utility package for Instant QR.

This package exposes helper functions used throughout the application.
"""

from .download import get_download_context, safe_filename
from .qr_generator import EncodingError, EncodingOptions, PngQrEncoder, QrImage, generate_qr
from .vcard import ContactRecord, create_vcard

__all__ = [
    "ContactRecord",
    "EncodingError",
    "EncodingOptions",
    "PngQrEncoder",
    "QrImage",
    "create_vcard",
    "generate_qr",
    "get_download_context",
    "safe_filename",
]
