import html
import logging

import bleach
from rest_framework import serializers

from records.models import Staff

logger = logging.getLogger(__name__)

# Day-first forms typed into the free-text date inputs, after ISO.
DATE_INPUT_FORMATS = ['iso-8601', '%d/%m/%Y', '%d-%m-%Y', '%d.%m.%Y', '%d %b %Y', '%d %B %Y']


def clean_text(v):
    """Strip markup; entities bleach escapes on the way out are turned back into text."""
    return html.unescape(bleach.clean((v or '').strip(), strip=True))


class LenientDateField(serializers.DateField):
    """Optional date that never rejects the request.

    Accepts ISO and the common day-first formats; anything else is stored
    as NULL.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('input_formats', DATE_INPUT_FORMATS)
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def to_internal_value(self, value):
        if value in ('', None):
            return None
        try:
            return super().to_internal_value(value)
        except serializers.ValidationError:
            logger.info("unparseable %s %r stored as NULL", self.field_name, value)
            return None


class StaffRegisterSerializer(serializers.Serializer):
    hospital_number = serializers.CharField(max_length=64)
    full_name = serializers.CharField(max_length=255)
    dob = LenientDateField()
    gender = serializers.CharField(required=False, allow_blank=True, max_length=20, default='')
    telephone = serializers.CharField(required=False, allow_blank=True, max_length=32, default='')
    force_file_number = serializers.CharField(required=False, allow_blank=True, max_length=64, default='')
    station = serializers.CharField(required=False, allow_blank=True, max_length=128, default='')
    rank = serializers.CharField(required=False, allow_blank=True, max_length=64, default='')

    def validate_hospital_number(self, v):
        # Natural key: stored exactly as typed, templates escape on output.
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Hospital number is required')
        return v

    def validate_full_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Full name is required')
        return v


class StaffListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default='')


class StaffListItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    hospital_number = serializers.CharField()
    full_name = serializers.CharField()
    station = serializers.CharField()
    rank = serializers.CharField()


class StaffSerializer(serializers.ModelSerializer):
    class Meta:
        model = Staff
        fields = [
            'id', 'hospital_number', 'full_name', 'dob', 'gender', 'telephone',
            'force_file_number', 'station', 'rank', 'photo', 'created_at', 'updated_at',
        ]
