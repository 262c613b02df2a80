import re

import pytest

from examflow.api.v2.dependencies import provide_upload_service
from examflow.application.services import UploadApplicationService
from examflow.main import app
from tests.fakes import InMemoryStorage
from tests.http_client import SyncASGIClient


@pytest.fixture
def storage():
    store = InMemoryStorage()
    app.dependency_overrides[provide_upload_service] = lambda: UploadApplicationService(
        storage=store, max_bytes=1024
    )
    yield store
    app.dependency_overrides.clear()


def test_upload_stores_file_under_timestamp_key(storage):
    client = SyncASGIClient(app)

    resp = client.post("/v2/files", files={"file": ("exam.PDF", b"%PDF-1.4 mock", "application/pdf")})

    assert resp.status_code == 200
    key = resp.json()["filePath"]
    assert re.fullmatch(r"\d{13}\.pdf", key)
    assert storage.objects[key] == b"%PDF-1.4 mock"


def test_upload_rejects_unsupported_type(storage):
    resp = SyncASGIClient(app).post("/v2/files", files={"file": ("notes.txt", b"hello", "text/plain")})

    assert resp.status_code == 415
    assert resp.json() == {"error": "Please upload a PDF or image file (PNG, JPG, JPEG)"}
    assert storage.objects == {}


def test_upload_rejects_large_file(storage):
    resp = SyncASGIClient(app).post("/v2/files", files={"file": ("big.png", b"x" * 2048, "image/png")})

    assert resp.status_code == 413
    assert storage.objects == {}
