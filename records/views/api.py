"""
JSON API over the records services.

The endpoints mirror the HTML actions so other systems can register
staff, add dependants and log visits without scraping forms.  Errors use
the ``{'ok': False, 'error': {...}}`` envelope produced by
:func:`records.exceptions.api_exception_handler`.  Like the HTML front
end, none of these endpoints require authentication.
"""
from __future__ import annotations

from django.http import JsonResponse
from django.views.decorators.http import require_GET
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..exceptions import StorageError, error_payload
from ..serializers.dependant import DependantCreateSerializer, DependantSerializer
from ..serializers.staff import (
    StaffListItemSerializer,
    StaffListQuerySerializer,
    StaffRegisterSerializer,
    StaffSerializer,
)
from ..serializers.visit import VisitCreateSerializer, VisitSerializer
from ..services.dependants import add_dependant
from ..services.export import csv_response
from ..services.staff import get_staff, register_staff, search_staff, staff_detail
from ..services.stats import dashboard_stats
from ..services.visits import log_visit


@api_view(['GET', 'POST'])
def staff_collection(request):
    """List staff (``?search=`` filters) or register/update one by hospital number."""
    if request.method == 'GET':
        q = StaffListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        rows = search_staff(q.validated_data['search'])
        return Response(StaffListItemSerializer(rows, many=True).data)
    data = StaffRegisterSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    staff, created = register_staff(data.validated_data, request.FILES.get('photo'))
    return Response(
        {'ok': True, 'created': created, 'data': StaffSerializer(staff).data},
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['GET'])
def staff_detail_view(request, pk: int):
    detail = staff_detail(get_staff(pk))
    return Response({
        'ok': True,
        'data': {
            **StaffSerializer(detail['staff']).data,
            'dependants': DependantSerializer(detail['dependants'], many=True).data,
            'visits': VisitSerializer(detail['visits'], many=True).data,
            'dependant_limit': detail['dependant_limit'],
        },
    })


@api_view(['POST'])
def add_dependant_view(request, pk: int):
    data = DependantCreateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    dependant = add_dependant(pk, data.validated_data, request.FILES.get('photo'))
    return Response({'ok': True, 'data': DependantSerializer(dependant).data}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
def log_visit_view(request, pk: int):
    data = VisitCreateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    visit = log_visit(pk, data.validated_data)
    return Response({'ok': True, 'data': VisitSerializer(visit).data}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def stats_view(request):
    return Response({'ok': True, 'data': dashboard_stats()})


@require_GET
def export_staff(request):
    # Plain view, so the DRF handler never sees this error.
    try:
        return csv_response()
    except StorageError as exc:
        return JsonResponse(error_payload(exc), status=exc.status_code)
