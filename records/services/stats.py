from django.db import DEFAULT_DB_ALIAS
from django.db.models import Count, Q

from records.models import Outcome, Staff, Visit
from records.services.storage import guard_storage


@guard_storage
def dashboard_stats(*, using: str = DEFAULT_DB_ALIAS) -> dict[str, int]:
    # Computed on every call; no caching.
    counters = Visit.objects.using(using).aggregate(
        total_visits=Count('id'),
        admissions=Count('id', filter=Q(admitted=True)),
        deaths=Count('id', filter=Q(outcome=Outcome.DIED)),
        discharged=Count('id', filter=Q(outcome__in=[Outcome.DISCHARGED, Outcome.RECOVERED])),
        referred=Count('id', filter=Q(outcome=Outcome.REFERRED)),
    )
    return {'total_staff': Staff.objects.using(using).count(), **counters}
