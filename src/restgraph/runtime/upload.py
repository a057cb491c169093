"""
Binary upload handling.

Accepts the upload objects GraphQL servers hand to resolvers: anything with an
async ``read(size)`` (starlette/FastAPI ``UploadFile``) or an async iterator of
byte chunks, plus a MIME type under ``content_type`` or ``mimetype``.
"""

from __future__ import annotations

import inspect
from typing import Any, Optional

CHUNK_SIZE = 64 * 1024


class UploadTooLarge(Exception):
    """Raised when an upload grows past the configured limit."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Upload exceeds maximum size of {limit} bytes")


class UnsupportedUpload(Exception):
    """Raised when a binary input is neither a file upload nor raw bytes or text."""

    def __init__(self, value: Any):
        self.value_type = type(value).__name__
        super().__init__(f"Cannot send {self.value_type} as a binary body")


def is_file_upload(value: Any) -> bool:
    """True for objects that can be streamed as an upload."""
    if isinstance(value, (bytes, bytearray, str)) or value is None:
        return False
    return callable(getattr(value, "read", None)) or hasattr(value, "__aiter__")


def get_upload_mimetype(upload: Any) -> Optional[str]:
    return getattr(upload, "content_type", None) or getattr(upload, "mimetype", None)


async def _iter_chunks(upload: Any):
    if hasattr(upload, "__aiter__"):
        async for chunk in upload:
            yield chunk
        return

    while True:
        chunk = upload.read(CHUNK_SIZE)
        if inspect.isawaitable(chunk):
            chunk = await chunk
        if not chunk:
            return
        yield chunk


async def read_upload(upload: Any, max_size: Optional[int] = None) -> bytes:
    """
    Consume ``upload`` completely into one contiguous buffer.

    Raises:
        UploadTooLarge: If ``max_size`` is set and exceeded
    """
    buffer = bytearray()
    async for chunk in _iter_chunks(upload):
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        buffer.extend(chunk)
        if max_size is not None and len(buffer) > max_size:
            raise UploadTooLarge(max_size)
    return bytes(buffer)
