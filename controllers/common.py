"""Helpers shared by resource controllers."""

import logging
from typing import BinaryIO, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.errors import ValidationError
from storage.blob_store import BlobStore, StoredBlob

logger = logging.getLogger(__name__)


class Upload(Protocol):
    """What controllers need from an uploaded file (FastAPI's UploadFile fits)."""

    filename: Optional[str]
    file: BinaryIO
    content_type: Optional[str]


def clean_text(value: Optional[str]) -> str:
    """Trimmed text, empty string for None."""
    return (value or "").strip()


def required_text(value: Optional[str], message: str) -> str:
    """Trimmed, non-empty text or a ValidationError with `message`."""
    cleaned = clean_text(value)
    if not cleaned:
        raise ValidationError(message)
    return cleaned


def has_file(upload: Optional[Upload]) -> bool:
    return upload is not None and bool(upload.filename)


def store_upload(blobs: BlobStore, upload: Upload, folder: str) -> StoredBlob:
    return blobs.upload(
        upload.file,
        filename=upload.filename or "",
        folder=folder,
        content_type=upload.content_type,
    )


def commit(db: Session) -> None:
    """Commit, rolling back before re-raising on store failure."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Entity store commit failed: {e}")
        raise
