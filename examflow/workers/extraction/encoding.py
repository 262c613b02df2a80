from __future__ import annotations

import base64

from examflow.domain.models import Document, EncodedPayload

CHUNK_SIZE = 8192


def encode_base64(data: bytes, chunk_size: int = CHUNK_SIZE) -> str:
    """Base64-encode ``data`` while reading at most ``chunk_size`` bytes at a time.

    Output is identical to ``base64.b64encode(data)``. Up to two bytes are carried
    between slices so that every encoded slice is a multiple of three bytes and
    no padding appears mid-stream.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    view = memoryview(data)
    parts: list[bytes] = []
    carry = b""
    for start in range(0, len(view), chunk_size):
        pending = carry + bytes(view[start : start + chunk_size])
        cut = len(pending) - len(pending) % 3
        if cut:
            parts.append(base64.b64encode(pending[:cut]))
        carry = pending[cut:]
    if carry:
        parts.append(base64.b64encode(carry))
    return b"".join(parts).decode("ascii")


def encode_document(document: Document, chunk_size: int = CHUNK_SIZE) -> EncodedPayload:
    return EncodedPayload(kind=document.kind, data=encode_base64(document.data, chunk_size))
