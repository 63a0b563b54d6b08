"""
File storage on local disk.

Files are written under ``settings.storage_dir/<folder>/`` and recorded as
StoredFile rows; the public URL is the ``/api/files/{id}`` download route.
"""
import logging
import re
import time
import uuid
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from ..config import settings
from ..models.file import StoredFile

logger = logging.getLogger(__name__)

ALLOWED_FOLDERS = {
    "logos",
    "licenses",
    "customer-payments",
    "dmc-payments",
    "itinerary-pdfs",
    "payment-qr",
}


def _sanitize_name(name: str) -> str:
    name = (name or "file").strip().replace("\\", "/").split("/")[-1]
    name = re.sub(r"[^a-zA-Z0-9.-]", "_", name)
    return name or "file"


def storage_root() -> Path:
    root = Path(settings.storage_dir).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


def save_bytes(
    db: Session,
    data: bytes,
    filename: str,
    content_type: Optional[str],
    folder: str,
    uploaded_by: Optional[str] = None,
) -> StoredFile:
    """Write bytes to disk and record them as a StoredFile."""
    if folder not in ALLOWED_FOLDERS:
        raise ValueError(f"Unknown storage folder: {folder}")

    key = f"{folder}/{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{_sanitize_name(filename)}"
    path = storage_root() / key
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)

    stored = StoredFile(
        name=filename or path.name,
        content_type=content_type or "application/octet-stream",
        size=len(data),
        storage_key=key,
        url="",
        uploaded_by=uploaded_by,
    )
    db.add(stored)
    db.flush()
    stored.url = f"/api/files/{stored.id}"
    logger.info(f"Stored {stored.size} bytes as {key}")
    return stored


async def save_upload(db: Session, upload, folder: str, uploaded_by: Optional[str] = None) -> Optional[StoredFile]:
    """Persist a FastAPI UploadFile; empty uploads are ignored."""
    if upload is None or not getattr(upload, "filename", None):
        return None
    data = await upload.read()
    if not data:
        return None
    return save_bytes(db, data, upload.filename, upload.content_type, folder, uploaded_by)


def path_for(stored: StoredFile) -> Path:
    root = storage_root()
    path = (root / stored.storage_key).resolve()
    if root not in path.parents:
        raise ValueError("File lies outside the storage directory")
    return path


def delete_file(db: Session, stored: StoredFile) -> None:
    path = path_for(stored)
    if path.exists():
        path.unlink()
    db.delete(stored)
