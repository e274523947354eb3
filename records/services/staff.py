import logging
from typing import Any, Mapping, Optional

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import Q

from records.exceptions import StaffNotFound
from records.models import Staff
from records.services.storage import guard_storage
from records.services.uploads import discard_upload, handle_upload

logger = logging.getLogger(__name__)

STAFF_TEXT_FIELDS = ('full_name', 'gender', 'telephone', 'force_file_number', 'station', 'rank')
SEARCH_FIELDS = ('hospital_number', 'full_name', 'station', 'force_file_number', 'rank')
LISTING_FIELDS = ('id', 'hospital_number', 'full_name', 'station', 'rank')


def _coerce_pk(staff_id: Any) -> int:
    try:
        return int(staff_id)
    except (TypeError, ValueError):
        raise StaffNotFound() from None


@guard_storage
def register_staff(fields: Mapping[str, Any], photo=None, *, using: str = DEFAULT_DB_ALIAS) -> tuple[Staff, bool]:
    """Insert or update the staff row keyed on ``hospital_number``.

    Re-registration overwrites the mutable fields in place and keeps the
    surrogate id and ``created_at``.  The stored photo is only replaced
    when a new one is uploaded.  Concurrent registrations of the same
    number are last-write-wins.
    """
    hospital_number = fields['hospital_number']
    defaults: dict[str, Any] = {name: fields.get(name) or '' for name in STAFF_TEXT_FIELDS}
    defaults['dob'] = fields.get('dob') or None
    photo_path = None
    try:
        with transaction.atomic(using=using):
            photo_path = handle_upload(photo)
            if photo_path:
                defaults['photo'] = photo_path
            staff, created = Staff.objects.using(using).update_or_create(
                hospital_number=hospital_number, defaults=defaults,
            )
    except Exception:
        discard_upload(photo_path)
        raise
    logger.info("%s staff %s (id=%s)", "registered" if created else "updated", hospital_number, staff.pk)
    return staff, created


@guard_storage
def get_staff(staff_id: Any, *, using: str = DEFAULT_DB_ALIAS) -> Staff:
    staff = Staff.objects.using(using).filter(pk=_coerce_pk(staff_id)).first()
    if staff is None:
        raise StaffNotFound()
    return staff


@guard_storage
def get_staff_by_hospital_number(hospital_number: str, *, using: str = DEFAULT_DB_ALIAS) -> Staff:
    staff = Staff.objects.using(using).filter(hospital_number=hospital_number).first()
    if staff is None:
        raise StaffNotFound()
    return staff


def lock_staff(staff_id: Any, *, using: str = DEFAULT_DB_ALIAS) -> Staff:
    """Fetch a staff row with a row lock; call inside ``transaction.atomic``."""
    staff = Staff.objects.using(using).select_for_update().filter(pk=_coerce_pk(staff_id)).first()
    if staff is None:
        raise StaffNotFound()
    return staff


@guard_storage
def search_staff(term: Optional[str] = '', *, using: str = DEFAULT_DB_ALIAS) -> list[dict]:
    """List staff newest first, optionally filtered by a free-text term.

    A non-empty term matches any of hospital number, full name, station,
    force/file number or rank as a case-insensitive substring.
    """
    qs = Staff.objects.using(using).order_by('-created_at', '-id')
    term = (term or '').strip()
    if term:
        cond = Q()
        for name in SEARCH_FIELDS:
            cond |= Q(**{f'{name}__icontains': term})
        qs = qs.filter(cond)
    return list(qs.values(*LISTING_FIELDS))


@guard_storage
def staff_detail(staff: Staff, *, using: str = DEFAULT_DB_ALIAS) -> dict:
    dependants = list(staff.dependants.using(using).order_by('created_at', 'id'))
    visits = list(staff.visits.using(using).order_by('-date_visit', '-id'))
    limit = settings.RECORDS_DEPENDANT_LIMIT
    return {
        'staff': staff,
        'dependants': dependants,
        'visits': visits,
        'dependant_limit': limit,
        'can_add_dependant': len(dependants) < limit,
    }
