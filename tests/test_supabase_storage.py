import io
from urllib import error as urlerror
from urllib import request

import pytest

from examflow.core.errors import ProviderHTTPError
from examflow.infra.storage.supabase import SupabaseStorage


class FakeResponse:
    def __init__(self, body: bytes):
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


def _storage() -> SupabaseStorage:
    return SupabaseStorage(base_url="https://proj.supabase.co/", service_key="svc", bucket="exam-files")


def test_read_bytes_downloads_object(monkeypatch):
    seen = []

    def fake_urlopen(req, timeout):
        seen.append(req)
        return FakeResponse(b"%PDF")

    monkeypatch.setattr(request, "urlopen", fake_urlopen)

    assert _storage().read_bytes("123.pdf") == b"%PDF"
    assert seen[0].full_url == "https://proj.supabase.co/storage/v1/object/exam-files/123.pdf"
    assert seen[0].get_header("Authorization") == "Bearer svc"
    assert seen[0].get_method() == "GET"


def test_save_bytes_posts_object(monkeypatch):
    seen = []

    def fake_urlopen(req, timeout):
        seen.append(req)
        return FakeResponse(b'{"Key": "exam-files/1.png"}')

    monkeypatch.setattr(request, "urlopen", fake_urlopen)

    assert _storage().save_bytes("1.png", b"img", "image/png") == "1.png"
    assert seen[0].get_method() == "POST"
    assert seen[0].data == b"img"
    assert seen[0].get_header("Content-type") == "image/png"


def test_missing_object_raises(monkeypatch):
    def fake_urlopen(req, timeout):
        raise urlerror.HTTPError(req.full_url, 404, "not found", {}, io.BytesIO(b"Object not found"))

    monkeypatch.setattr(request, "urlopen", fake_urlopen)

    with pytest.raises(ProviderHTTPError) as excinfo:
        _storage().read_bytes("gone.pdf")
    assert excinfo.value.status_code == 404
