from __future__ import annotations

from urllib import error as urlerror
from urllib import parse, request

from examflow.core.errors import ProviderError, ProviderHTTPError
from examflow.infra.ports.storage import StoragePort


class SupabaseStorage(StoragePort):
    """Object storage through the Supabase Storage REST API."""

    provider_name = "supabase_storage"

    def __init__(self, *, base_url: str, service_key: str, bucket: str, timeout_seconds: int = 30):
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self.bucket = bucket
        self.timeout_seconds = max(3, int(timeout_seconds))

    def _object_url(self, key: str) -> str:
        return (
            f"{self.base_url}/storage/v1/object/"
            f"{parse.quote(self.bucket)}/{parse.quote(key.lstrip('/'))}"
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
        }

    def _send(self, req: request.Request) -> bytes:
        try:
            with request.urlopen(req, timeout=self.timeout_seconds) as resp:
                return resp.read()
        except urlerror.HTTPError as exc:
            try:
                detail = exc.read().decode("utf-8", errors="replace")
            except Exception:
                detail = str(exc)
            raise ProviderHTTPError(self.provider_name, exc.code, detail) from exc
        except urlerror.URLError as exc:
            raise ProviderError(self.provider_name, f"connection error: {exc.reason}") from exc

    def read_bytes(self, key: str) -> bytes:
        req = request.Request(url=self._object_url(key), method="GET", headers=self._headers())
        return self._send(req)

    def save_bytes(self, key: str, data: bytes, content_type: str | None) -> str:
        headers = self._headers()
        headers["Content-Type"] = content_type or "application/octet-stream"
        headers["x-upsert"] = "false"
        req = request.Request(url=self._object_url(key), method="POST", data=data, headers=headers)
        self._send(req)
        return key
