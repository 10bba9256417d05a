"""Helpers for image handlers: thread offloading and binary responses."""

import asyncio
from typing import Any, Callable

from fastapi import Response

PNG_MEDIA_TYPE = "image/png"


async def run_blocking(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Run Pillow (or any other blocking) work in a worker thread.

    Each call gets its own arguments and returns a fresh object, so concurrent
    requests never share a buffer.
    """

    return await asyncio.to_thread(func, *args, **kwargs)


def render_bytes(payload: bytes | bytearray | memoryview, media_type: str = PNG_MEDIA_TYPE) -> Response:
    """Wrap a fully encoded image in a response; the body is never streamed."""

    return Response(content=bytes(payload), media_type=media_type)


__all__ = ["PNG_MEDIA_TYPE", "run_blocking", "render_bytes"]
