"""Hospital-side endpoints for service requests forwarded by admins."""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsHospitalRole
from ..serializers.ambulance import HospitalResponseSerializer
from ..services import forwarding


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def service_requests(request):
    data = forwarding.service_requests_for(request.user)
    return Response({'requests': data, 'total': len(data)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def accept_service_request(request, service_request_id: int):
    s = HospitalResponseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    forwarding.accept_service_request(request.user, service_request_id, s.validated_data.get('notes'))
    return Response({'message': 'Service request accepted successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def reject_service_request(request, service_request_id: int):
    s = HospitalResponseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    forwarding.reject_service_request(request.user, service_request_id, s.validated_data.get('notes'))
    return Response({'message': 'Service request rejected successfully'})
