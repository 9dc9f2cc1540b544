import re


FILENAME_PREFIX_LENGTH = 30
DEFAULT_FILENAME = "qr-code"


def safe_filename(payload, default=DEFAULT_FILENAME):
    """Derive a file name base from the first characters of *payload*."""
    cleaned = re.sub(r"[^a-zA-Z0-9]", "_", (payload or "")[:FILENAME_PREFIX_LENGTH])
    return cleaned.lower() or default


def get_download_context(result, default=DEFAULT_FILENAME):
    """
    Decide what the download button offers for the last generated code.
    Returns dict:
      - can_download: bool
      - file_name: str
      - data: bytes
      - mime: str
    """
    if result is None:
        return {"can_download": False, "file_name": "", "data": b"", "mime": "image/png"}

    return {
        "can_download": True,
        "file_name": f"{safe_filename(result.payload, default)}.png",
        "data": result.image.png,
        "mime": "image/png",
    }
