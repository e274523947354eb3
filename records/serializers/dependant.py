from rest_framework import serializers

from records.models import Dependant
from records.serializers.staff import LenientDateField, clean_text


class DependantCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    relation = serializers.CharField(max_length=64)
    dob = LenientDateField()

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v


class DependantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Dependant
        fields = ['id', 'name', 'dob', 'relation', 'photo', 'created_at']
