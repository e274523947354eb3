"""
Action-keyed HTML front end.

Every page lives at ``/``.  The ``action`` parameter (query string or form
body) together with the request method selects what happens:

* ``create_staff`` / ``add_dependant`` / ``log_visit`` (POST) mutate and
  redirect to the staff detail view.
* ``export_csv`` (GET) downloads the staff table as CSV.
* ``view_staff`` (GET) shows one record selected by ``id`` or
  ``hospital_number`` below the listing.
* anything else renders the listing and dashboard, filtered by
  ``search`` when given.

A mutating action sent with GET falls through to the home page.  There
is no authentication on any of these actions.
"""
from __future__ import annotations

import logging
from urllib.parse import urlencode

from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone

from ..exceptions import DependantLimitReached, StaffNotFound, StorageError
from ..models import Outcome
from ..serializers.dependant import DependantCreateSerializer
from ..serializers.staff import StaffRegisterSerializer
from ..serializers.visit import VisitCreateSerializer
from ..services.dependants import add_dependant
from ..services.export import csv_response
from ..services.staff import (
    get_staff,
    get_staff_by_hospital_number,
    register_staff,
    search_staff,
    staff_detail,
)
from ..services.stats import dashboard_stats
from ..services.visits import log_visit

logger = logging.getLogger(__name__)


def _detail_url(**params) -> str:
    query = {'action': 'view_staff'}
    query.update({k: v for k, v in params.items() if v not in (None, '')})
    return f"{reverse('records-home')}?{urlencode(query)}"


def _first_error(errors) -> str:
    for field, messages in errors.items():
        return f"{field}: {messages[0]}"
    return 'Invalid input'


def _create_staff(request):
    data = StaffRegisterSerializer(data=request.POST)
    if not data.is_valid():
        return _render_home(request, form_errors=data.errors, status=400)
    staff, _ = register_staff(data.validated_data, request.FILES.get('photo'))
    return redirect(_detail_url(hospital_number=staff.hospital_number))


def _add_dependant(request):
    staff_id = request.POST.get('staff_id')
    data = DependantCreateSerializer(data=request.POST)
    if not data.is_valid():
        return redirect(_detail_url(id=staff_id, error=_first_error(data.errors)))
    try:
        add_dependant(staff_id, data.validated_data, request.FILES.get('photo'))
    except DependantLimitReached as exc:
        return redirect(_detail_url(id=staff_id, error=exc.message))
    except StaffNotFound:
        pass  # the detail view reports the missing record
    return redirect(_detail_url(id=staff_id))


def _log_visit(request):
    staff_id = request.POST.get('staff_id')
    data = VisitCreateSerializer(data=request.POST)
    if not data.is_valid():
        return redirect(_detail_url(id=staff_id, error=_first_error(data.errors)))
    try:
        log_visit(staff_id, data.validated_data)
    except StaffNotFound:
        pass
    return redirect(_detail_url(id=staff_id))


POST_ACTIONS = {
    'create_staff': _create_staff,
    'add_dependant': _add_dependant,
    'log_visit': _log_visit,
}


def _load_detail(request) -> dict:
    try:
        if request.GET.get('id'):
            staff = get_staff(request.GET['id'])
        elif request.GET.get('hospital_number'):
            staff = get_staff_by_hospital_number(request.GET['hospital_number'])
        else:
            raise StaffNotFound()
    except StaffNotFound as exc:
        return {'not_found': exc.message}
    return staff_detail(staff)


def _render_home(request, *, form_errors=None, status=200):
    search = request.GET.get('search', '')
    stats = dashboard_stats()
    context = {
        'search': search,
        'staff_list': search_staff(search),
        'stats': stats,
        'chart': {
            'labels': ['Admissions', 'Deaths', 'Discharged', 'Referred'],
            'data': [stats['admissions'], stats['deaths'], stats['discharged'], stats['referred']],
        },
        'form_errors': form_errors or {},
        'form_data': request.POST if form_errors else {},
        'outcomes': Outcome.values,
        'today': timezone.localdate(),
        'error': request.GET.get('error', ''),
    }
    if request.GET.get('action') == 'view_staff':
        context['show_detail'] = True
        context.update(_load_detail(request))
    return render(request, 'records/home.html', context, status=status)


def index(request):
    action = request.GET.get('action') or request.POST.get('action') or 'home'
    try:
        if request.method == 'POST' and action in POST_ACTIONS:
            return POST_ACTIONS[action](request)
        if request.method == 'GET' and action == 'export_csv':
            return csv_response()
        return _render_home(request)
    except StorageError as exc:
        return render(request, 'records/error.html', {'message': exc.message}, status=exc.status_code)
