"""
File storage helpers on top of Django's ``default_storage``.

Only the public URL returned here is persisted on the models; the
storage key is recovered from that URL when the file must be removed.
"""
from __future__ import annotations

import logging
import os
import uuid
from typing import Optional
from urllib.parse import unquote, urlparse

from django.conf import settings
from django.core.files.storage import default_storage

from ..exceptions import AppError

logger = logging.getLogger(__name__)

RECORDS_FOLDER = 'medivault/medical-records'
PROFILES_FOLDER = 'medivault/profiles'


def _check_upload(upload, allowed_types, max_mb: int) -> None:
    content_type = getattr(upload, 'content_type', '') or ''
    if allowed_types is not None and content_type not in allowed_types:
        raise AppError(400, f"Invalid file type. Allowed types: {', '.join(allowed_types)}")
    if allowed_types is None and not content_type.startswith('image/'):
        raise AppError(400, 'Only image files are allowed')
    if upload.size > max_mb * 1024 * 1024:
        raise AppError(400, f"File too large. Maximum size is {max_mb}MB")


def save_upload(upload, folder: str = RECORDS_FOLDER, *, images_only: bool = False,
                prefix: Optional[str] = None) -> tuple[str, str, int]:
    """Validate and store an uploaded file.

    Returns ``(url, content_type, size_bytes)``.
    """
    if images_only:
        _check_upload(upload, None, settings.PROFILE_IMAGE_MAX_MB)
    else:
        _check_upload(upload, settings.ALLOWED_UPLOAD_TYPES, settings.UPLOAD_MAX_MB)
    ext = os.path.splitext(upload.name or '')[1].lower()
    stem = f"{prefix}-{uuid.uuid4().hex}" if prefix else uuid.uuid4().hex
    name = default_storage.save(f"{folder}/{stem}{ext}", upload)
    return default_storage.url(name), upload.content_type, upload.size


def storage_key_from_url(url: str) -> Optional[str]:
    """Recover the storage key from a stored file URL.

    ``/media/medivault/medical-records/abc.pdf`` and
    ``https://cdn.example.com/media/medivault/medical-records/abc.pdf``
    both map to ``medivault/medical-records/abc.pdf``.
    """
    if not url:
        return None
    path = unquote(urlparse(url).path)
    media_path = urlparse(settings.MEDIA_URL).path or '/'
    if media_path != '/' and media_path in path:
        path = path.split(media_path, 1)[1]
    key = path.lstrip('/')
    return key or None


def delete_remote_file(url: str) -> bool:
    """Best-effort delete of the file behind ``url``; never raises."""
    key = storage_key_from_url(url)
    if not key:
        return False
    try:
        default_storage.delete(key)
    except Exception:
        logger.warning("could not delete stored file %s", key, exc_info=True)
        return False
    return True
