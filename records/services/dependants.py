import logging
from typing import Any, Mapping

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, transaction

from records.exceptions import DependantLimitReached
from records.models import Dependant
from records.services.staff import lock_staff
from records.services.storage import guard_storage
from records.services.uploads import discard_upload, handle_upload

logger = logging.getLogger(__name__)


@guard_storage
def add_dependant(staff_id: Any, fields: Mapping[str, Any], photo=None, *, using: str = DEFAULT_DB_ALIAS) -> Dependant:
    """Add a dependant unless the staff record is already at the cap.

    The owning staff row stays locked from the count until the insert
    commits, so concurrent calls cannot push a record past the limit.
    """
    limit = settings.RECORDS_DEPENDANT_LIMIT
    photo_path = None
    try:
        with transaction.atomic(using=using):
            staff = lock_staff(staff_id, using=using)
            count = Dependant.objects.using(using).filter(staff=staff).count()
            if count >= limit:
                logger.warning("dependant limit reached for staff %s (%d/%d)", staff.pk, count, limit)
                raise DependantLimitReached()
            photo_path = handle_upload(photo)
            dependant = Dependant.objects.using(using).create(
                staff=staff,
                name=fields.get('name') or '',
                dob=fields.get('dob') or None,
                relation=fields.get('relation') or '',
                photo=photo_path,
            )
    except Exception:
        discard_upload(photo_path)
        raise
    logger.info("added dependant %s to staff %s (%d/%d)", dependant.pk, staff.pk, count + 1, limit)
    return dependant
