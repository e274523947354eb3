import logging
from typing import Any, Mapping

from django.db import DEFAULT_DB_ALIAS, transaction
from django.utils import timezone

from records.models import Visit
from records.services.staff import get_staff
from records.services.storage import guard_storage

logger = logging.getLogger(__name__)

OPTIONAL_FIELDS = ('date_admission', 'outcome', 'referral_destination', 'discharge_date', 'notes')


def is_admitted(fields: Mapping[str, Any]) -> bool:
    """Checkbox semantics: any submitted value counts, only False/None do not."""
    return 'admitted' in fields and fields['admitted'] not in (False, None)


@guard_storage
def log_visit(staff_id: Any, fields: Mapping[str, Any], *, using: str = DEFAULT_DB_ALIAS) -> Visit:
    """Record a visit; outcome fields are stored as given, without cross-checks."""
    with transaction.atomic(using=using):
        staff = get_staff(staff_id, using=using)
        visit = Visit.objects.using(using).create(
            staff=staff,
            date_visit=fields.get('date_visit') or timezone.localdate(),
            reason=fields.get('reason') or '',
            condition=fields.get('condition') or '',
            visit_type=fields.get('visit_type') or '',
            admitted=is_admitted(fields),
            **{name: fields.get(name) or None for name in OPTIONAL_FIELDS},
        )
    logger.info("logged visit %s for staff %s (admitted=%s, outcome=%s)", visit.pk, staff.pk, visit.admitted, visit.outcome)
    return visit
