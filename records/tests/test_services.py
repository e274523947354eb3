import csv
import io
import re
from datetime import date, timedelta
from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import OperationalError
from django.utils import timezone

from records.exceptions import DependantLimitReached, StaffNotFound, StorageError
from records.models import Dependant, Staff, Visit
from records.services.dependants import add_dependant
from records.services.export import EXPORT_HEADER, csv_response
from records.services.staff import (
    get_staff,
    get_staff_by_hospital_number,
    register_staff,
    search_staff,
    staff_detail,
)
from records.services.stats import dashboard_stats
from records.services.uploads import handle_upload, safe_filename
from records.services.visits import log_visit

pytestmark = pytest.mark.django_db


def _fill_dependants(staff, n):
    Dependant.objects.bulk_create([Dependant(staff=staff, name=f'Dep {i}', relation='Child') for i in range(n)])


# --- staff -----------------------------------------------------------------

def test_register_new_hospital_number_creates_one_row():
    staff, created = register_staff({'hospital_number': 'HN1', 'full_name': 'Ada Obi', 'station': 'Central'})
    assert created is True
    assert Staff.objects.count() == 1
    assert staff.station == 'Central'
    assert staff.photo is None


def test_reregistration_updates_in_place_and_keeps_created_at():
    first, _ = register_staff({'hospital_number': 'HN1', 'full_name': 'Ada Obi', 'rank': 'Officer'})
    second, created = register_staff({'hospital_number': 'HN1', 'full_name': 'Ada Obi-Eze', 'rank': 'Sergeant'})
    assert created is False
    assert Staff.objects.count() == 1
    assert second.pk == first.pk
    stored = Staff.objects.get()
    assert stored.full_name == 'Ada Obi-Eze'
    assert stored.rank == 'Sergeant'
    assert stored.created_at == first.created_at
    assert stored.updated_at >= first.updated_at


def test_reregistration_keeps_dependants_and_visits_attached(make_staff):
    staff = make_staff('HN1')
    add_dependant(staff.pk, {'name': 'Kid', 'relation': 'Son'})
    log_visit(staff.pk, {'reason': 'Fever'})
    register_staff({'hospital_number': 'HN1', 'full_name': 'Renamed'})
    assert Dependant.objects.filter(staff_id=staff.pk).count() == 1
    assert Visit.objects.filter(staff_id=staff.pk).count() == 1


def test_register_stores_photo_and_keeps_it_on_update(media_root):
    photo = SimpleUploadedFile('my photo!.jpg', b'jpeg-bytes', content_type='image/jpeg')
    staff, _ = register_staff({'hospital_number': 'HN1', 'full_name': 'Ada'}, photo)
    assert re.fullmatch(r'uploads/\d+_my_photo_\.jpg', staff.photo)
    assert (media_root / staff.photo).read_bytes() == b'jpeg-bytes'

    updated, _ = register_staff({'hospital_number': 'HN1', 'full_name': 'Ada B'})
    assert updated.photo == staff.photo


def test_failed_registration_removes_stored_photo(media_root):
    photo = SimpleUploadedFile('face.jpg', b'img')
    with mock.patch.object(Staff, 'save', side_effect=OperationalError('disk I/O error')):
        with pytest.raises(StorageError):
            register_staff({'hospital_number': 'HN1', 'full_name': 'Ada'}, photo)
    assert list((media_root / 'uploads').iterdir()) == []
    assert not Staff.objects.exists()


def test_lookups_raise_staff_not_found(make_staff):
    staff = make_staff('HN1')
    assert get_staff(staff.pk) == staff
    assert get_staff(str(staff.pk)) == staff
    assert get_staff_by_hospital_number('HN1') == staff
    with pytest.raises(StaffNotFound):
        get_staff(staff.pk + 100)
    with pytest.raises(StaffNotFound):
        get_staff('abc')
    with pytest.raises(StaffNotFound):
        get_staff_by_hospital_number('missing')


# --- uploads ---------------------------------------------------------------

def test_safe_filename_replaces_unsafe_characters_and_prefixes_time():
    assert safe_filename('pass port (1).png', now=1700000000) == '1700000000_pass_port__1_.png'
    assert safe_filename('../../etc/pa$$wd', now=1700000000) == '1700000000_pa__wd'
    assert safe_filename('C:\\Users\\me\\face.JPG', now=5) == '5_face.JPG'


def test_handle_upload_without_file_returns_none():
    assert handle_upload(None) is None
    assert handle_upload(SimpleUploadedFile('empty.jpg', b'')) is None


# --- dependants ------------------------------------------------------------

def test_add_dependant_below_limit_adds_exactly_one(make_staff):
    staff = make_staff('HN1')
    _fill_dependants(staff, 9)
    dependant = add_dependant(staff.pk, {'name': 'Tenth', 'relation': 'Daughter', 'dob': date(2015, 1, 2)})
    assert Dependant.objects.filter(staff=staff).count() == 10
    assert dependant.relation == 'Daughter'
    assert dependant.dob == date(2015, 1, 2)


def test_add_dependant_at_limit_is_rejected_without_write(make_staff):
    staff = make_staff('HN1')
    _fill_dependants(staff, 10)
    with pytest.raises(DependantLimitReached):
        add_dependant(staff.pk, {'name': 'Eleventh', 'relation': 'Son'})
    assert Dependant.objects.filter(staff=staff).count() == 10
    assert not Dependant.objects.filter(name='Eleventh').exists()


def test_rejected_dependant_photo_is_not_stored(make_staff, media_root):
    staff = make_staff('HN1')
    _fill_dependants(staff, 10)
    photo = SimpleUploadedFile('kid.jpg', b'img')
    with pytest.raises(DependantLimitReached):
        add_dependant(staff.pk, {'name': 'Eleventh', 'relation': 'Son'}, photo)
    assert not (media_root / 'uploads').exists()


def test_failed_dependant_insert_removes_stored_photo(make_staff, media_root):
    staff = make_staff('HN1')
    photo = SimpleUploadedFile('kid.jpg', b'img')
    with mock.patch.object(Dependant, 'save', side_effect=OperationalError('disk I/O error')):
        with pytest.raises(StorageError):
            add_dependant(staff.pk, {'name': 'Kid', 'relation': 'Son'}, photo)
    assert list((media_root / 'uploads').iterdir()) == []
    assert not Dependant.objects.exists()


def test_limit_is_per_staff(make_staff):
    full = make_staff('HN1')
    other = make_staff('HN2')
    _fill_dependants(full, 10)
    add_dependant(other.pk, {'name': 'Only', 'relation': 'Spouse'})
    assert other.dependants.count() == 1


def test_add_dependant_for_unknown_staff():
    with pytest.raises(StaffNotFound):
        add_dependant(12345, {'name': 'Orphan', 'relation': 'Son'})
    assert Dependant.objects.count() == 0


# --- visits ----------------------------------------------------------------

@pytest.mark.parametrize('fields, expected', [
    ({}, False),
    ({'admitted': '1'}, True),
    ({'admitted': ''}, True),
    ({'admitted': 'off'}, True),
    ({'admitted': True}, True),
    ({'admitted': False}, False),
])
def test_admitted_follows_field_presence(make_staff, fields, expected):
    staff = make_staff('HN1')
    visit = log_visit(staff.pk, fields)
    assert Visit.objects.get(pk=visit.pk).admitted is expected


def test_log_visit_defaults(make_staff):
    staff = make_staff('HN1')
    visit = log_visit(staff.pk, {'reason': 'Checkup', 'outcome': ''})
    visit.refresh_from_db()
    assert visit.date_visit == timezone.localdate()
    assert visit.outcome is None
    assert visit.date_admission is None
    assert visit.referral_destination is None
    assert visit.discharge_date is None
    assert visit.notes is None


def test_outcome_without_admission_is_accepted(make_staff):
    staff = make_staff('HN1')
    visit = log_visit(staff.pk, {'outcome': 'Referred', 'referral_destination': 'General Hospital'})
    visit.refresh_from_db()
    assert visit.admitted is False
    assert visit.outcome == 'Referred'


def test_log_visit_for_unknown_staff():
    with pytest.raises(StaffNotFound):
        log_visit(999, {'reason': 'x'})


def test_staff_detail_orders_visits_newest_first(make_staff):
    staff = make_staff('HN1')
    today = date.today()
    log_visit(staff.pk, {'date_visit': today - timedelta(days=10), 'reason': 'old'})
    log_visit(staff.pk, {'date_visit': today, 'reason': 'new'})
    log_visit(staff.pk, {'date_visit': today - timedelta(days=3), 'reason': 'mid'})
    detail = staff_detail(staff)
    assert [v.reason for v in detail['visits']] == ['new', 'mid', 'old']
    assert detail['can_add_dependant'] is True


# --- search ----------------------------------------------------------------

def test_search_matches_any_of_five_columns_case_insensitively(make_staff):
    by_number = make_staff('A12-001', 'Number Match')
    by_name = make_staff('HN2', 'Mrs a12 Name')
    by_station = make_staff('HN3', 'Station Match', station='Post A12')
    by_file = make_staff('HN4', 'File Match', force_file_number='ff/a12')
    by_rank = make_staff('HN5', 'Rank Match', rank='GRADE-A12')
    make_staff('HN6', 'No Match', station='B21', telephone='A12000')

    ids = {row['id'] for row in search_staff('A12')}
    assert ids == {by_number.pk, by_name.pk, by_station.pk, by_file.pk, by_rank.pk}


def test_search_returns_listing_projection(make_staff):
    make_staff('HN1', 'Ada', station='Central', rank='Officer', telephone='0800')
    rows = search_staff('Ada')
    assert rows == [{'id': rows[0]['id'], 'hospital_number': 'HN1', 'full_name': 'Ada', 'station': 'Central', 'rank': 'Officer'}]


def test_empty_search_lists_all_newest_first(make_staff):
    now = timezone.now()
    for i, number in enumerate(['HN1', 'HN2', 'HN3']):
        staff = make_staff(number)
        Staff.objects.filter(pk=staff.pk).update(created_at=now - timedelta(hours=10 - i))
    assert [row['hospital_number'] for row in search_staff('')] == ['HN3', 'HN2', 'HN1']
    assert [row['hospital_number'] for row in search_staff('   ')] == ['HN3', 'HN2', 'HN1']


# --- statistics ------------------------------------------------------------

def test_dashboard_stats_counts_outcomes(make_staff):
    staff = make_staff('HN1')
    make_staff('HN2')
    for outcome, admitted in [('Died', True), ('Died', False), ('Discharged', True), ('Referred', False), ('Recovered', True)]:
        fields = {'outcome': outcome}
        if admitted:
            fields['admitted'] = '1'
        log_visit(staff.pk, fields)
    log_visit(staff.pk, {})

    assert dashboard_stats() == {
        'total_staff': 2,
        'total_visits': 6,
        'admissions': 3,
        'deaths': 2,
        'discharged': 2,
        'referred': 1,
    }


def test_dashboard_stats_on_empty_database():
    assert dashboard_stats() == {
        'total_staff': 0, 'total_visits': 0, 'admissions': 0, 'deaths': 0, 'discharged': 0, 'referred': 0,
    }


# --- export ----------------------------------------------------------------

def test_export_has_header_and_one_row_per_staff(make_staff):
    make_staff('HN1', 'Ada Obi', dob=date(1980, 5, 17), gender='Female', telephone='0801',
               force_file_number='FF/1', station='Central', rank='Officer')
    staff = make_staff('HN2', 'Bola, Jr.')
    add_dependant(staff.pk, {'name': 'Kid', 'relation': 'Son'})
    log_visit(staff.pk, {'reason': 'x'})

    response = csv_response()
    body = b''.join(response.streaming_content).decode()
    rows = list(csv.reader(io.StringIO(body)))
    assert rows[0] == EXPORT_HEADER
    assert rows[1:] == [
        ['HN1', 'Ada Obi', '1980-05-17', 'Female', '0801', 'FF/1', 'Central', 'Officer'],
        ['HN2', 'Bola, Jr.', '', '', '', '', '', ''],
    ]
    assert response['Content-Type'] == 'text/csv'
    assert re.fullmatch(r'attachment; filename="export_\d{8}_\d{6}\.csv"', response['Content-Disposition'])


# --- storage faults --------------------------------------------------------

def test_database_faults_become_storage_error():
    with mock.patch.object(Staff.objects, 'using', side_effect=OperationalError('disk I/O error')):
        with pytest.raises(StorageError) as excinfo:
            search_staff('x')
    assert excinfo.value.message == 'internal error'
    assert 'disk' not in str(excinfo.value)
