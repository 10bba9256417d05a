"""Multipart upload intake for image routes."""

import logging
from dataclasses import dataclass

from fastapi import Request
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "upload"


@dataclass(frozen=True)
class UploadedImage:
    """
    An uploaded file held fully in memory for the lifetime of one request.

    Attributes:
        data: Raw file bytes as sent by the client.
        filename: Original filename, or ``"upload"`` when the client sent none.
        content_type: Declared content type of the part, if any.
    """

    data: bytes
    filename: str
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


async def read_upload(request: Request, field_name: str) -> UploadedImage | None:
    """
    Extract the file sent under ``field_name`` from a multipart request.

    Returns None when there is nothing usable: the field is absent, carries a
    plain text value, the body is not multipart, or it cannot be parsed. The
    caller decides how to report the missing file.
    """

    try:
        form = await request.form()
    except (MultiPartException, HTTPException) as exc:
        logger.warning("Could not parse multipart body: %s", exc)
        return None

    try:
        # First file part wins when a client repeats the field.
        upload = next(
            (value for value in form.getlist(field_name) if isinstance(value, UploadFile)),
            None,
        )
        if upload is None:
            return None

        data = await upload.read()
        return UploadedImage(
            data=data,
            filename=upload.filename or DEFAULT_FILENAME,
            content_type=upload.content_type,
        )
    finally:
        await form.close()


__all__ = ["UploadedImage", "read_upload"]
