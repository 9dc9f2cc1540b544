import pytest

from utils.qr_generator import EncodingError, QrImage


class FakeEncoder:
    """Records payloads instead of drawing them."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def encode(self, payload, options):
        self.calls.append((payload, options))
        if self.fail:
            raise EncodingError("too long")
        return QrImage(png=b"fake:" + payload.encode("utf-8"), width=options.width)


@pytest.fixture
def fake_encoder():
    return FakeEncoder()


@pytest.fixture
def failing_encoder():
    return FakeEncoder(fail=True)


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "app_settings.json"
    monkeypatch.setattr("settings_store.SETTINGS_FILE", str(path))
    return path
