"""
CSV export of the staff table.

Only the eight registration columns are exported; dependants and visits
are not.  The whole table is read before streaming starts, which is fine
for a single facility's roster.
"""
from __future__ import annotations

import csv
from datetime import datetime
from typing import Iterator, Optional

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS
from django.http import StreamingHttpResponse
from django.utils import timezone

from records.models import Staff
from records.services.storage import guard_storage

EXPORT_HEADER = ['Hospital No', 'Full Name', 'DOB', 'Gender', 'Telephone', 'Force/File No', 'Station', 'Rank']
EXPORT_FIELDS = (
    'hospital_number', 'full_name', 'dob', 'gender', 'telephone', 'force_file_number', 'station', 'rank',
)


class Echo:
    """File-like object whose ``write`` hands the value back to the caller."""

    def write(self, value: str) -> str:
        return value


@guard_storage
def staff_export_rows(*, using: str = DEFAULT_DB_ALIAS) -> list[tuple]:
    return list(Staff.objects.using(using).order_by('id').values_list(*EXPORT_FIELDS))


def export_filename(now: Optional[datetime] = None) -> str:
    return (now or timezone.localtime()).strftime(settings.RECORDS_EXPORT_FILENAME)


def iter_csv(rows: list[tuple]) -> Iterator[str]:
    writer = csv.writer(Echo())
    yield writer.writerow(EXPORT_HEADER)
    for row in rows:
        yield writer.writerow(row)


def csv_response(*, using: str = DEFAULT_DB_ALIAS) -> StreamingHttpResponse:
    rows = staff_export_rows(using=using)
    response = StreamingHttpResponse(iter_csv(rows), content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{export_filename()}"'
    return response
