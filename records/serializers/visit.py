from rest_framework import serializers
from rest_framework.fields import empty

from records.models import Outcome, Visit
from records.serializers.staff import LenientDateField


class CheckboxField(serializers.Field):
    """Checkbox-style flag: present with any value means True.

    A JSON ``false`` is honoured as False.  When the field is absent it is
    skipped entirely, leaving the caller to treat it as unchecked.
    """

    def get_value(self, dictionary):
        # Bypass DRF's HTML handling, which treats '' as "not submitted".
        if self.field_name in dictionary:
            return dictionary[self.field_name]
        return empty

    def to_internal_value(self, data):
        return data is not False

    def to_representation(self, value):
        return bool(value)


class VisitCreateSerializer(serializers.Serializer):
    date_visit = LenientDateField()
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')
    condition = serializers.CharField(required=False, allow_blank=True, max_length=128, default='')
    visit_type = serializers.CharField(required=False, allow_blank=True, max_length=64, default='')
    admitted = CheckboxField(required=False, allow_null=True)
    date_admission = LenientDateField()
    outcome = serializers.ChoiceField(choices=Outcome.choices, required=False, allow_blank=True, allow_null=True)
    referral_destination = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    discharge_date = LenientDateField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class VisitSerializer(serializers.ModelSerializer):
    class Meta:
        model = Visit
        fields = [
            'id', 'date_visit', 'reason', 'condition', 'visit_type', 'admitted', 'date_admission',
            'outcome', 'referral_destination', 'discharge_date', 'notes', 'created_at',
        ]
