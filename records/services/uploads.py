"""
Photo upload handling for staff and dependant records.

Files are written under ``MEDIA_ROOT/<RECORDS_UPLOADS_DIR>`` and the
record stores the path relative to ``MEDIA_ROOT``.  There is no size,
MIME or content validation; only the file name is sanitised.
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Optional

from django.conf import settings
from django.core.files.storage import FileSystemStorage
from django.core.files.uploadedfile import UploadedFile

from records.exceptions import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]')


def safe_filename(name: str, now: Optional[float] = None) -> str:
    """Return ``<unix time>_<name>`` with unsafe characters replaced by ``_``."""
    base = os.path.basename((name or '').replace('\\', '/'))
    stamp = int(time.time() if now is None else now)
    return f"{stamp}_{_UNSAFE_CHARS.sub('_', base)}"


def uploads_storage() -> FileSystemStorage:
    return FileSystemStorage(location=os.path.join(settings.MEDIA_ROOT, settings.RECORDS_UPLOADS_DIR))


def handle_upload(uploaded: Optional[UploadedFile]) -> Optional[str]:
    """Store an uploaded photo and return its path relative to MEDIA_ROOT.

    A missing field or an empty upload returns ``None``; callers treat that
    as "no photo".  Django rejects transport-level upload errors while
    parsing the request, so such fields never reach this function.
    """
    if uploaded is None or not getattr(uploaded, 'name', None) or not uploaded.size:
        return None
    try:
        stored = uploads_storage().save(safe_filename(uploaded.name), uploaded)
    except OSError as exc:
        logger.exception("could not store upload %r", uploaded.name)
        raise StorageError() from exc
    logger.info("stored upload %s (%d bytes)", stored, uploaded.size)
    return f"{settings.RECORDS_UPLOADS_DIR}/{stored}"


def discard_upload(path: Optional[str]) -> None:
    """Remove a file stored by :func:`handle_upload` whose record was never written."""
    if not path:
        return
    try:
        FileSystemStorage(location=settings.MEDIA_ROOT).delete(path)
    except OSError:
        logger.exception("could not remove orphaned upload %s", path)
    else:
        logger.info("removed orphaned upload %s", path)
