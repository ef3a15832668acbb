"""Accepted data shapes for uploads and chunked reading over them."""

import inspect
import io
from collections.abc import AsyncIterator
from typing import Any

from .exceptions import InvalidInputError

CHUNK_SIZE = 64 * 1024

BUFFER_TYPES = (bytes, bytearray, memoryview)


def _has_async_read(data: Any) -> bool:
    return inspect.iscoroutinefunction(getattr(data, "read", None))


def is_byte_stream(data: Any) -> bool:
    """Check whether ``data`` can be read sequentially as bytes.

    Async iterables, objects with an async ``read`` (e.g. aiofiles handles)
    and synchronous binary file-likes all qualify. Text-mode files do not.
    """
    if isinstance(data, (str, io.TextIOBase, *BUFFER_TYPES)):
        return False
    return (
        hasattr(data, "__aiter__")
        or _has_async_read(data)
        or callable(getattr(data, "read", None))
    )


def validate_upload_data(data: Any) -> None:
    """Reject anything that is not a byte stream, buffer or string.

    Raises:
        InvalidInputError: If ``data`` has an unsupported type
    """
    if isinstance(data, (str, *BUFFER_TYPES)) or is_byte_stream(data):
        return
    raise InvalidInputError(
        "Object data must be a byte stream, a bytes-like buffer or a string, "
        f"got {type(data).__name__}",
        details={"type": type(data).__name__},
    )


async def iter_chunks(data: Any, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield the bytes of ``data`` in order.

    Args:
        data: Value previously accepted by ``validate_upload_data``
        chunk_size: Read size for stream sources

    Yields:
        Non-empty byte chunks

    Raises:
        InvalidInputError: If ``data`` has an unsupported type, or a stream
            produces something other than bytes
    """
    validate_upload_data(data)

    if isinstance(data, str):
        yield data.encode("utf-8")
    elif isinstance(data, BUFFER_TYPES):
        yield bytes(data)
    elif _has_async_read(data):
        while chunk := await data.read(chunk_size):
            yield _as_bytes(chunk)
    elif hasattr(data, "__aiter__"):
        async for chunk in data:
            if chunk:
                yield _as_bytes(chunk)
    else:
        while chunk := data.read(chunk_size):
            yield _as_bytes(chunk)


def _as_bytes(chunk: Any) -> bytes:
    if isinstance(chunk, BUFFER_TYPES):
        return bytes(chunk)
    raise InvalidInputError(
        f"Byte stream produced {type(chunk).__name__}, expected bytes",
        details={"type": type(chunk).__name__},
    )
