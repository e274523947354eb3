"""Records application for the staff clinic.

This package contains the models, services, serializers, views and
route registrations for staff, dependant and visit records.
"""
