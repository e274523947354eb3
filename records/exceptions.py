"""
Domain errors for the records services and the unified API error handler.

Services raise the exceptions below; the HTML dispatcher turns them into
redirects or visible messages and the JSON API maps them onto the
``{'ok': False, 'error': {...}}`` envelope via :func:`api_exception_handler`.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler


class RecordsError(Exception):
    """Base class for errors surfaced by the records services."""
    code = 'records_error'
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'records error'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class StaffNotFound(RecordsError):
    code = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Staff not found'


class DependantLimitReached(RecordsError):
    """The staff record already owns the maximum number of dependants."""
    code = 'dependant_limit'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Max dependants reached'


class StorageError(RecordsError):
    """A database fault, converted so raw driver messages are not leaked."""
    code = 'internal_error'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'internal error'


def error_payload(exc: RecordsError) -> dict:
    return {'ok': False, 'error': {'code': exc.code, 'message': exc.message}}


def api_exception_handler(exc, context):
    if isinstance(exc, RecordsError):
        return Response(error_payload(exc), status=exc.status_code)
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': 'internal error'}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    code = exc.default_code if isinstance(exc, APIException) else 'api_error'
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code)
