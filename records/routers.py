"""
URL mappings for the records app.

The HTML front end is a single action-keyed page at ``/``; the JSON API
lives under ``/api/``.  Trailing slashes are deliberately omitted.
"""
from django.urls import path, include

from .views import api, dispatch, health

urlpatterns = [
    path('', dispatch.index, name='records-home'),
    path('healthz', health.healthz, name='healthz'),
    path('', include('django_prometheus.urls')),
    # JSON API
    path('api/staff', api.staff_collection, name='api-staff'),
    path('api/staff/export', api.export_staff, name='api-staff-export'),
    path('api/staff/<int:pk>', api.staff_detail_view, name='api-staff-detail'),
    path('api/staff/<int:pk>/dependants', api.add_dependant_view, name='api-staff-dependants'),
    path('api/staff/<int:pk>/visits', api.log_visit_view, name='api-staff-visits'),
    path('api/stats', api.stats_view, name='api-stats'),
]
