import logging
import os
import secrets

from fastapi import UploadFile

from hris.config import settings
from hris.exceptions import ServerError, ValidationError
from hris.models.documents import ALLOWED_FILE_TYPES

logger = logging.getLogger(__name__)


def create_upload_directory() -> str:
    upload_dir = os.path.abspath(settings.UPLOAD_DIR)
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


def validate_file_type(file: UploadFile):
    if file.content_type not in ALLOWED_FILE_TYPES:
        raise ValidationError(detail=f"Unsupported file type: {file.content_type}")
    return file.content_type


async def read_upload(file: UploadFile) -> bytes:
    """Read the upload, refusing anything over MAX_UPLOAD_SIZE."""
    file_content = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        raise ValidationError(detail=f"File exceeds the maximum size of {settings.MAX_UPLOAD_SIZE} bytes")
    if not file_content:
        raise ValidationError(detail="Uploaded file is empty")
    return file_content


def save_file(file_content: bytes, original_filename: str):
    """Write the content under a random name keeping the original extension. Returns (name, path)."""
    extension = os.path.splitext(original_filename or "")[-1].lower()
    token_name = secrets.token_hex(10) + extension
    file_path = os.path.join(create_upload_directory(), token_name)

    try:
        with open(file_path, "wb") as document:
            document.write(file_content)
    except OSError as e:
        logger.error("Could not write upload to %s: %s", file_path, e)
        raise ServerError(detail="Could not store the uploaded file")

    return token_name, file_path


def remove_file(file_path: str) -> None:
    try:
        os.remove(file_path)
    except FileNotFoundError:
        logger.warning("Stored file %s was already missing", file_path)
