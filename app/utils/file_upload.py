"""
File Upload Utility - Buffer uploads in memory and encode them as data URIs.

Uploaded logos, avatars and resumes never touch the local disk. They are
read into memory (max 5MB), converted to a base64 data URI and handed to
the media store, which returns a public URL.
"""

import base64
import logging
import mimetypes
import os
from typing import NamedTuple, Optional
from fastapi import UploadFile

from app.core.config import get_settings
from app.core.exceptions import FileTooLarge, MalformedFile, NoFile

settings = get_settings()
logger = logging.getLogger(__name__)

DEFAULT_MIMETYPE = "application/octet-stream"


class BufferedFile(NamedTuple):
    buffer: Optional[bytes]
    original_name: Optional[str]
    content_type: Optional[str] = None


class DataUri(NamedTuple):
    mimetype: str
    base64: str
    content: str


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension, including the dot."""
    return os.path.splitext(filename or "")[1].lower()


async def read_upload(file: Optional[UploadFile], max_bytes: Optional[int] = None) -> Optional[BufferedFile]:
    """
    Read an uploaded file into memory.

    Args:
        file: FastAPI UploadFile, or None when the field was not sent
        max_bytes: size ceiling, defaults to MAX_UPLOAD_MB

    Returns:
        BufferedFile, or None when no file was uploaded

    Raises:
        FileTooLarge when the content exceeds the ceiling
    """
    if file is None:
        return None

    limit = max_bytes if max_bytes is not None else settings.max_upload_bytes
    # Read one byte past the limit so oversized files are detected without buffering them fully
    content = await file.read(limit + 1)
    if len(content) > limit:
        logger.info("Rejected upload %r: larger than %d bytes", file.filename, limit)
        raise FileTooLarge(limit // (1024 * 1024))

    return BufferedFile(buffer=content, original_name=file.filename, content_type=file.content_type)


def get_data_uri(file: Optional[BufferedFile]) -> DataUri:
    """
    Encode a buffered file as a self-contained data URI.

    The mime type comes from the original file extension, then the declared
    content type.

    Raises:
        NoFile: nothing was uploaded
        MalformedFile: original name or buffer missing
    """
    if file is None:
        raise NoFile()
    if not file.original_name or not file.buffer:
        raise MalformedFile()

    mimetype, _ = mimetypes.guess_type(file.original_name)
    mimetype = mimetype or file.content_type or DEFAULT_MIMETYPE

    encoded = base64.b64encode(file.buffer).decode("ascii")
    return DataUri(
        mimetype=mimetype,
        base64=encoded,
        content=f"data:{mimetype};base64,{encoded}"
    )
