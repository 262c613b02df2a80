"""Identifier helpers."""

import time

from ulid import ULID


def new_public_id(prefix: str) -> str:
    """Return a prefixed ULID string, e.g. ``req_01J5K...``."""
    return f"{prefix}{ULID()}"


def new_upload_key(extension: str) -> str:
    """Return a storage key of the form ``<epoch-millis>.<ext>``."""
    ext = extension.strip().lstrip(".").lower() or "bin"
    return f"{int(time.time() * 1000)}.{ext}"
