import bleach
from rest_framework import serializers

from careops.models import AmbulanceRequest

MISSING = 'Missing required fields'
PRIORITIES = [p for p, _ in AmbulanceRequest.PRIORITY_CHOICES]
STATUSES = [s for s, _ in AmbulanceRequest.STATUS_CHOICES]
# statuses staff may move a request into from the dispatch board
PROGRESS_STATUSES = ['assigned', 'on_the_way', 'completed', 'cancelled']


def _clean(v):
    return bleach.clean((v or '').strip(), strip=True)


class AmbulanceCreateSerializer(serializers.Serializer):
    pickup_address = serializers.CharField(error_messages={'required': MISSING, 'blank': MISSING})
    destination_address = serializers.CharField(error_messages={'required': MISSING, 'blank': MISSING})
    emergency_type = serializers.CharField(max_length=255, error_messages={'required': MISSING, 'blank': MISSING})
    contact_number = serializers.CharField(max_length=20, error_messages={'required': MISSING, 'blank': MISSING})
    customer_condition = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    priority = serializers.ChoiceField(choices=PRIORITIES, required=False, default='normal',
                                       error_messages={'invalid_choice': 'Invalid priority'})

    def validate_pickup_address(self, v):
        return _clean(v)

    def validate_destination_address(self, v):
        return _clean(v)

    def validate_emergency_type(self, v):
        return _clean(v)

    def validate_customer_condition(self, v):
        return _clean(v) or None


class AmbulanceUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUSES, error_messages={
        'required': 'Invalid status provided', 'invalid_choice': 'Invalid status provided'})
    assigned_staff_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_notes(self, v):
        return _clean(v) or None


class AmbulanceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PROGRESS_STATUSES, error_messages={
        'required': 'Invalid status provided', 'invalid_choice': 'Invalid status provided'})
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_notes(self, v):
        return _clean(v) or None


FORWARD_MISSING = 'Missing required fields: requestId, hospitalId'


class ForwardSerializer(serializers.Serializer):
    requestId = serializers.IntegerField(min_value=1, error_messages={
        'required': FORWARD_MISSING, 'null': FORWARD_MISSING, 'invalid': FORWARD_MISSING})
    hospitalId = serializers.IntegerField(min_value=1, error_messages={
        'required': FORWARD_MISSING, 'null': FORWARD_MISSING, 'invalid': FORWARD_MISSING})


class HospitalResponseSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_notes(self, v):
        return _clean(v) or None
