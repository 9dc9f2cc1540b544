import io

import pytest
from PIL import Image

from utils.qr_generator import EncodingError, EncodingOptions, PngQrEncoder, generate_qr


def open_png(image):
    return Image.open(io.BytesIO(image.png))


def test_encodes_png_at_requested_width():
    image = PngQrEncoder().encode("https://example.com", EncodingOptions(width=300, margin=2))

    assert image.png.startswith(b"\x89PNG")
    assert open_png(image).size == (300, 300)
    assert image.width == 300


def test_default_options_match_high_redundancy():
    options = EncodingOptions()

    assert options.error_correction == "H"
    assert options.width == 512
    assert options.margin == 2


def test_empty_payload_is_rejected():
    with pytest.raises(EncodingError):
        PngQrEncoder().encode("", EncodingOptions())


def test_payload_over_capacity_is_rejected():
    # Version 40 at level H holds 1273 bytes.
    with pytest.raises(EncodingError):
        PngQrEncoder().encode("x" * 1500, EncodingOptions(error_correction="H"))


def test_same_payload_fits_at_lower_correction_level():
    image = PngQrEncoder().encode("x" * 1500, EncodingOptions(error_correction="L", width=200))
    assert open_png(image).size == (200, 200)


def test_data_url_wraps_png():
    image = PngQrEncoder().encode("hello", EncodingOptions(width=64))
    assert image.data_url.startswith("data:image/png;base64,iVBOR")


@pytest.mark.parametrize(
    "kwargs",
    [{"error_correction": "X"}, {"width": 0}, {"margin": -1}],
)
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        EncodingOptions(**kwargs)


def test_options_from_settings():
    options = EncodingOptions.from_settings(
        {"error_correction": "q", "qr_width": "256", "qr_margin": 4, "fill_color": "navy"}
    )

    assert options == EncodingOptions(
        error_correction="Q", width=256, margin=4, fill_color="navy", back_color="white"
    )


def test_generate_qr_reads_saved_settings(settings_path):
    settings_path.write_text('{"qr_width": 128}', encoding="utf-8")

    image = generate_qr("hello")

    assert open_png(image).size == (128, 128)


@pytest.mark.parametrize("kwargs", [{"fill_color": "blu"}, {"back_color": "#12"}])
def test_unknown_colors_are_rejected(kwargs):
    with pytest.raises(ValueError):
        EncodingOptions(**kwargs)


def test_hex_colors_are_accepted():
    image = PngQrEncoder().encode(
        "hello", EncodingOptions(width=64, fill_color="#1a237e", back_color="#ffffff")
    )
    assert open_png(image).size == (64, 64)
