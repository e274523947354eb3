"""
Django admin registrations for the records models.

Superusers can inspect staff records with their dependants and visits
inline via the ``/admin/`` URL.  The admin site keeps Django's own login;
the public record pages do not.

Dependants and visits are view-only here: new ones go through the record
services, which enforce the dependant cap, and neither is ever edited or
deleted.  Staff rows can be corrected but not deleted.
"""

from django.contrib import admin

from .models import Dependant, Staff, Visit


class ViewOnlyMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class DependantInline(ViewOnlyMixin, admin.TabularInline):
    model = Dependant
    extra = 0
    fields = ('name', 'relation', 'dob', 'photo')


class VisitInline(ViewOnlyMixin, admin.TabularInline):
    model = Visit
    extra = 0
    fields = ('date_visit', 'visit_type', 'condition', 'admitted', 'outcome', 'referral_destination', 'discharge_date')


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('hospital_number', 'full_name', 'station', 'rank', 'created_at', 'updated_at')
    list_filter = ('station', 'rank', 'gender')
    search_fields = ('hospital_number', 'full_name', 'station', 'force_file_number', 'rank')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [DependantInline, VisitInline]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Dependant)
class DependantAdmin(ViewOnlyMixin, admin.ModelAdmin):
    list_display = ('name', 'relation', 'staff', 'created_at')
    search_fields = ('name', 'staff__hospital_number', 'staff__full_name')


@admin.register(Visit)
class VisitAdmin(ViewOnlyMixin, admin.ModelAdmin):
    list_display = ('staff', 'date_visit', 'visit_type', 'admitted', 'outcome')
    list_filter = ('admitted', 'outcome', 'visit_type')
    search_fields = ('staff__hospital_number', 'staff__full_name', 'reason')
    date_hierarchy = 'date_visit'
