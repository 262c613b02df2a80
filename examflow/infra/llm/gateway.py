from __future__ import annotations

import json
import logging
from typing import Any
from urllib import error as urlerror
from urllib import request

from examflow.core.errors import ProviderError, ProviderHTTPError, ProviderResponseError, ProviderTimeoutError
from examflow.infra.ports.llm import ChatMessage, LLMPort

logger = logging.getLogger(__name__)


def _is_timeout_error(exc: Exception) -> bool:
    reason = getattr(exc, "reason", None)
    message = f"{exc} {reason or ''}".lower()
    return isinstance(exc, TimeoutError) or isinstance(reason, TimeoutError) or "timed out" in message


def _message_text(content: Any) -> str | None:
    if isinstance(content, str):
        return content
    # Some gateways return content as a list of typed parts.
    if isinstance(content, list):
        texts = [
            part.get("text")
            for part in content
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        if texts:
            return "".join(texts)
    return None


class GatewayLLM(LLMPort):
    """OpenAI-compatible chat-completions client. One attempt per call, no retries."""

    provider_name = "llm_gateway"

    def __init__(self, *, api_key: str, url: str, model_name: str, timeout_seconds: int = 60):
        self.api_key = api_key
        self.url = url
        self.model_name = model_name
        self.timeout_seconds = max(3, int(timeout_seconds))

    def chat(
        self,
        *,
        messages: list[ChatMessage],
        model: str | None = None,
        timeout_seconds: float | None = None,
    ) -> str:
        model_name = model or self.model_name
        timeout = timeout_seconds or self.timeout_seconds
        payload = {"model": model_name, "messages": messages}

        req = request.Request(
            url=self.url,
            method="POST",
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

        try:
            with request.urlopen(req, timeout=timeout) as resp:
                body = resp.read().decode("utf-8")
        except urlerror.HTTPError as exc:
            try:
                detail = exc.read().decode("utf-8", errors="replace")
            except Exception:
                detail = str(exc)
            logger.error("LLM gateway error status=%s detail=%s", exc.code, detail[:500])
            raise ProviderHTTPError(self.provider_name, exc.code, detail) from exc
        except urlerror.URLError as exc:
            if _is_timeout_error(exc):
                raise ProviderTimeoutError(self.provider_name, f"timeout after {timeout}s") from exc
            raise ProviderError(self.provider_name, f"connection error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ProviderTimeoutError(self.provider_name, f"timeout after {timeout}s") from exc

        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as exc:
            raise ProviderResponseError(self.provider_name, "response body is not JSON") from exc

        choices = parsed.get("choices") if isinstance(parsed, dict) else None
        if not choices:
            raise ProviderResponseError(self.provider_name, "response has no choices")

        message = (choices[0] or {}).get("message") or {}
        text = _message_text(message.get("content"))
        if text is None:
            raise ProviderResponseError(self.provider_name, "response message has no text content")
        return text
