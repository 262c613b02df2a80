"""Error taxonomy for the extraction pipeline.

Adapters raise the low-level ``Provider*`` exceptions below. Everything that
leaves the pipeline is an ``ExtractionError`` carrying one of the ``ErrorKind``
values together with the HTTP status the caller should see.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    MISSING_INPUT = "MissingInput"
    STORAGE_ERROR = "StorageError"
    PROVIDER_RATE_LIMITED = "ProviderRateLimited"
    PROVIDER_QUOTA_EXHAUSTED = "ProviderQuotaExhausted"
    PROVIDER_FAILURE = "ProviderFailure"
    STRUCTURING_ERROR = "StructuringError"
    EMPTY_RESULT = "EmptyResult"


# Soft outcome: reported with 200 and an empty question list.
EMPTY_RESULT_STATUS = 200


class ExtractionError(Exception):
    kind: ErrorKind = ErrorKind.PROVIDER_FAILURE
    status_code: int = 500
    default_message: str = "Unknown error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        return {"error": self.message}


class MissingInputError(ExtractionError):
    kind = ErrorKind.MISSING_INPUT
    status_code = 400
    default_message = "File path is required"


class StorageError(ExtractionError):
    kind = ErrorKind.STORAGE_ERROR
    status_code = 500
    default_message = "Failed to download file"


class ProviderRateLimitedError(ExtractionError):
    kind = ErrorKind.PROVIDER_RATE_LIMITED
    status_code = 429
    default_message = "Rate limit exceeded. Please try again later."


class ProviderQuotaExhaustedError(ExtractionError):
    kind = ErrorKind.PROVIDER_QUOTA_EXHAUSTED
    status_code = 402
    default_message = "AI credits depleted. Please add funds to continue."


class ProviderFailureError(ExtractionError):
    kind = ErrorKind.PROVIDER_FAILURE
    status_code = 500
    default_message = "AI processing failed"


class ConfigurationError(ProviderFailureError):
    default_message = "LLM gateway credential is not configured"


class StructuringError(ExtractionError):
    kind = ErrorKind.STRUCTURING_ERROR
    status_code = 500
    default_message = "Failed to parse extracted questions"


INVALID_FORMAT_MESSAGE = "Invalid questions format"


class ProviderError(RuntimeError):
    """Raw failure reported by an upstream OCR/LLM/storage adapter."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class ProviderHTTPError(ProviderError):
    def __init__(self, provider: str, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(provider, f"HTTP {status_code} {detail[:500]}".rstrip())


class ProviderTimeoutError(ProviderError):
    pass


class ProviderResponseError(ProviderError):
    """The provider answered 2xx but the body was not usable."""


def classify_error(exc: BaseException) -> ExtractionError:
    """Map any failure raised inside the pipeline onto the public taxonomy."""
    if isinstance(exc, ExtractionError):
        return exc
    if isinstance(exc, ProviderHTTPError):
        if exc.status_code == 429:
            return ProviderRateLimitedError()
        if exc.status_code == 402:
            return ProviderQuotaExhaustedError()
        return ProviderFailureError()
    if isinstance(exc, (ProviderTimeoutError, TimeoutError)):
        return ProviderFailureError("AI provider timed out")
    return ProviderFailureError()
