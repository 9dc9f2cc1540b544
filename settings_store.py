import json
import logging
import os

from PIL import ImageColor


logger = logging.getLogger(__name__)

SETTINGS_FILE = os.getenv("QR_SETTINGS_FILE", "app_settings.json")

QR_WIDTH_RANGE = (64, 4096)
QR_MARGIN_RANGE = (0, 20)


DEFAULT_SETTINGS = {
    "error_correction": "H",
    "qr_width": 512,
    "qr_margin": 2,
    "fill_color": "black",
    "back_color": "white",
    "default_filename": "qr-code",
    "vcard_escaping": True,
    "log_level": "INFO",
}


def _in_range(bounds):
    low, high = bounds

    def check(value):
        value = int(value)
        if not low <= value <= high:
            raise ValueError(f"{value} is outside {low}..{high}")
        return value

    return check


def _error_correction(value):
    value = str(value).upper()
    if value not in ("L", "M", "Q", "H"):
        raise ValueError(value)
    return value


def _color(value):
    ImageColor.getrgb(value)
    return value


def _filename(value):
    if not isinstance(value, str) or not value.strip():
        raise ValueError(value)
    return value.strip()


def _flag(value):
    if not isinstance(value, bool):
        raise ValueError(value)
    return value


def _log_level(value):
    value = str(value).upper()
    if not isinstance(logging.getLevelName(value), int):
        raise ValueError(value)
    return value


SETTING_CHECKS = {
    "error_correction": _error_correction,
    "qr_width": _in_range(QR_WIDTH_RANGE),
    "qr_margin": _in_range(QR_MARGIN_RANGE),
    "fill_color": _color,
    "back_color": _color,
    "default_filename": _filename,
    "vcard_escaping": _flag,
    "log_level": _log_level,
}


def clean_settings(settings):
    """Replace values that cannot be used with their defaults."""
    cleaned = dict(settings)
    for key, check in SETTING_CHECKS.items():
        value = cleaned.get(key, DEFAULT_SETTINGS[key])
        try:
            cleaned[key] = check(value)
        except (TypeError, ValueError, AttributeError):
            logger.warning("Ignoring invalid %s setting %r", key, value)
            cleaned[key] = DEFAULT_SETTINGS[key]
    return cleaned


def load_settings(path=None):
    path = path or SETTINGS_FILE
    settings = DEFAULT_SETTINGS.copy()
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as file_obj:
                data = json.load(file_obj)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
            return settings
        if isinstance(data, dict):
            settings.update(data)
        else:
            logger.warning("Ignoring settings file %s: expected a JSON object", path)
    return clean_settings(settings)


def save_settings(settings, path=None):
    path = path or SETTINGS_FILE
    merged = DEFAULT_SETTINGS.copy()
    merged.update(settings or {})
    with open(path, "w", encoding="utf-8") as file_obj:
        json.dump(merged, file_obj, indent=2)
    logger.info("Saved settings to %s", path)
    return merged
