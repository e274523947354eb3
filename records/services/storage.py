import functools
import logging

from django.db import DatabaseError

from records.exceptions import StorageError

logger = logging.getLogger(__name__)


def guard_storage(func):
    """Convert database faults raised by ``func`` into :class:`StorageError`."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("storage failure in %s", func.__qualname__)
            raise StorageError() from exc
    return wrapper
