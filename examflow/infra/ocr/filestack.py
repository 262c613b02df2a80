from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any
from urllib import error as urlerror
from urllib import parse, request

from examflow.core.errors import ProviderError, ProviderHTTPError, ProviderResponseError, ProviderTimeoutError
from examflow.domain.models import EncodedPayload
from examflow.infra.ports.ocr import OCRPort

logger = logging.getLogger(__name__)

_UPLOAD_URL = "https://www.filestackapi.com/api/store/S3"
_CDN_URL = "https://cdn.filestackapi.com"


def extract_ocr_text(data: Any) -> str:
    """Pull the transcription out of an OCR response.

    Shapes are tried in order: ``{"text": ...}``, ``{"ocr": {"text": ...}}``,
    then a list of ``{"text": ...}`` items joined by blank lines.
    """
    if isinstance(data, dict):
        text = data.get("text")
        if isinstance(text, str) and text:
            return text
        ocr = data.get("ocr")
        if isinstance(ocr, dict):
            nested = ocr.get("text")
            if isinstance(nested, str) and nested:
                return nested
        return ""
    if isinstance(data, list):
        return "\n\n".join(
            str(item.get("text") or "") if isinstance(item, dict) else ""
            for item in data
        )
    return ""


class FilestackOCR(OCRPort):
    """Document OCR: upload the raw file, then fetch OCR output for its handle."""

    provider_name = "filestack"

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int = 60,
        upload_url: str = _UPLOAD_URL,
        cdn_url: str = _CDN_URL,
    ):
        self.api_key = api_key
        self.timeout_seconds = max(3, int(timeout_seconds))
        self.upload_url = upload_url
        self.cdn_url = cdn_url.rstrip("/")

    def _request_json(self, req: request.Request) -> Any:
        try:
            with request.urlopen(req, timeout=self.timeout_seconds) as resp:
                body = resp.read().decode("utf-8")
        except urlerror.HTTPError as exc:
            try:
                detail = exc.read().decode("utf-8", errors="replace")
            except Exception:
                detail = str(exc)
            raise ProviderHTTPError(self.provider_name, exc.code, detail) from exc
        except urlerror.URLError as exc:
            if isinstance(exc.reason, TimeoutError):
                raise ProviderTimeoutError(self.provider_name, f"timeout after {self.timeout_seconds}s") from exc
            raise ProviderError(self.provider_name, f"connection error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ProviderTimeoutError(self.provider_name, f"timeout after {self.timeout_seconds}s") from exc

        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise ProviderResponseError(self.provider_name, "response body is not JSON") from exc

    def upload(self, data: bytes, mime_type: str) -> str:
        url = f"{self.upload_url}?{parse.urlencode({'key': self.api_key})}"
        req = request.Request(url=url, method="POST", data=data, headers={"Content-Type": mime_type})
        uploaded = self._request_json(req)
        handle = uploaded.get("handle") if isinstance(uploaded, dict) else None
        if not isinstance(handle, str) or not handle:
            raise ProviderResponseError(self.provider_name, "upload response has no handle")
        return handle

    def ocr(self, handle: str) -> str:
        url = f"{self.cdn_url}/output=format:json/{parse.quote(self.api_key)}/{parse.quote(handle)}"
        return extract_ocr_text(self._request_json(request.Request(url=url, method="GET")))

    def extract_text(self, payload: EncodedPayload) -> str:
        try:
            raw = base64.b64decode(payload.data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ProviderResponseError(self.provider_name, "payload is not valid base64") from exc

        handle = self.upload(raw, payload.mime_type)
        logger.info("Document uploaded for OCR handle=%s", handle)

        text = self.ocr(handle)
        if not text.strip():
            raise ProviderResponseError(self.provider_name, "OCR response contained no text")
        logger.info("Document OCR complete text_length=%d", len(text))
        return text
