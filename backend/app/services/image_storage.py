import logging
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from ..config import MAX_IMAGE_BYTES, PROFILE_IMAGE_SUBDIR, UPLOAD_DIR
from ..utils.error_handlers import FileUploadError, get_error_message
from ..utils.validation import sanitize_filename

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
}
PUBLIC_PREFIX = f"/uploads/{PROFILE_IMAGE_SUBDIR}/"


def _image_dir() -> Path:
    return Path(UPLOAD_DIR) / PROFILE_IMAGE_SUBDIR


async def store_profile_image(file: UploadFile | None, *, user_id: int) -> str:
    """
    Validate and persist an uploaded profile image.

    Returns the public URL (`/uploads/profile-images/<name>`). Nothing is left on
    disk when validation fails part-way through the stream.
    """
    if not file or not file.filename:
        raise FileUploadError(get_error_message("no_image"))

    original_filename = sanitize_filename(Path(file.filename).name)
    ext = Path(original_filename).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise FileUploadError(get_error_message("invalid_image_type"))
    if file.content_type and file.content_type.lower() not in ALLOWED_CONTENT_TYPES:
        raise FileUploadError(get_error_message("invalid_image_type"))

    base_dir = _image_dir()
    base_dir.mkdir(parents=True, exist_ok=True)

    stored_filename = f"{int(user_id)}_{uuid4().hex}{ext}"
    dest = base_dir / stored_filename

    size = 0
    try:
        with open(dest, "wb") as out:
            while True:
                chunk = await file.read(1024 * 1024)  # 1MB
                if not chunk:
                    break
                size += len(chunk)
                if size > MAX_IMAGE_BYTES:
                    raise FileUploadError(get_error_message("file_too_large"))
                out.write(chunk)
    except Exception:
        dest.unlink(missing_ok=True)
        raise
    finally:
        await file.close()

    if size == 0:
        dest.unlink(missing_ok=True)
        raise FileUploadError(get_error_message("no_image"))

    logger.info("Stored profile image %s (%d bytes) for user %s", stored_filename, size, user_id)
    return PUBLIC_PREFIX + stored_filename


def delete_profile_image(url: str | None) -> bool:
    """Remove a stored image by its public URL. URLs we did not issue are ignored."""
    if not url or not url.startswith(PUBLIC_PREFIX):
        return False

    name = Path(url[len(PUBLIC_PREFIX):]).name
    path = _image_dir() / name
    if not path.is_file():
        return False

    try:
        path.unlink()
    except OSError as e:
        logger.warning("Failed to delete profile image %s: %s", name, e)
        return False
    logger.info("Deleted profile image %s", name)
    return True
