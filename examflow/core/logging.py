"""Logging setup with a per-request id attached to every record."""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

from examflow.utils.ids import new_public_id

_request_id: ContextVar[str | None] = ContextVar("examflow_request_id", default=None)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        return True


def configure_logging(level: int | str = logging.INFO) -> None:
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        if getattr(handler, "_examflow", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler._examflow = True  # type: ignore[attr-defined]
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel(level)


def bind_request_id(request_id: str | None = None) -> str:
    """Set the request id for the current context and return it."""
    value = request_id or new_public_id("req_")
    _request_id.set(value)
    return value


def current_request_id() -> str | None:
    return _request_id.get()
