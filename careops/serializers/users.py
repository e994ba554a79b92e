from decimal import Decimal

import bleach
from rest_framework import serializers

REQUIRED_DOCTOR = 'Full name, email, and password are required'


def _clean(v):
    return bleach.clean((v or '').strip(), strip=True)


class DoctorCreateSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255, error_messages={'required': REQUIRED_DOCTOR, 'blank': REQUIRED_DOCTOR})
    email = serializers.CharField(max_length=254, error_messages={'required': REQUIRED_DOCTOR, 'blank': REQUIRED_DOCTOR})
    password = serializers.CharField(write_only=True, trim_whitespace=False, error_messages={'required': REQUIRED_DOCTOR, 'blank': REQUIRED_DOCTOR})
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    specialization = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    experience_years = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    consultation_fee = serializers.DecimalField(required=False, allow_null=True, max_digits=10, decimal_places=2, min_value=Decimal("0"))
    available_days = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    bio = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_full_name(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError(REQUIRED_DOCTOR)
        return v

    def validate_specialization(self, v):
        return _clean(v) or None

    def validate_bio(self, v):
        return _clean(v) or None


class AdminCreateSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255, error_messages={'required': 'Name is required', 'blank': 'Name is required'})
    email = serializers.CharField(max_length=254, error_messages={'required': 'Email is required', 'blank': 'Email is required'})
    password = serializers.CharField(write_only=True, trim_whitespace=False, error_messages={'required': 'Password is required', 'blank': 'Password is required'})
    confirmPassword = serializers.CharField(write_only=True, trim_whitespace=False, error_messages={'required': 'Confirm Password is required', 'blank': 'Confirm Password is required'})
    state = serializers.CharField(max_length=100, error_messages={'required': 'State is required', 'blank': 'State is required'})
    district = serializers.CharField(max_length=100, error_messages={'required': 'District is required', 'blank': 'District is required'})

    def validate_full_name(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v


class PasswordResetSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True, trim_whitespace=False, error_messages={'required': 'Password is required', 'blank': 'Password is required'})
    confirmPassword = serializers.CharField(write_only=True, required=False, trim_whitespace=False)
