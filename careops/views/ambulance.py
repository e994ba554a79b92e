"""
Ambulance request endpoints.

Customers create requests and read their own; staff and admins work
the dispatch board; admins forward pending requests to hospitals.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsAdminRole, IsCustomerRole, IsStaffOrAdmin, IsStaffRole, require
from ..serializers.ambulance import (
    AmbulanceCreateSerializer,
    AmbulanceStatusSerializer,
    AmbulanceUpdateSerializer,
    ForwardSerializer,
)
from ..services import ambulance as ambulance_service
from ..services import forwarding, hospitals


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def ambulance_requests(request):
    if request.method == 'POST':
        require(request, IsCustomerRole)
        s = AmbulanceCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        req = ambulance_service.create_request(request.user, s.validated_data)
        return Response({'message': 'Ambulance request created successfully', 'requestId': req.id},
                        status=status.HTTP_201_CREATED)

    require(request, IsStaffOrAdmin)
    data = ambulance_service.dispatch_board()
    return Response({'requests': data, 'total': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsCustomerRole])
def customer_ambulance_requests(request):
    data = ambulance_service.customer_requests(request.user)
    return Response({'requests': data, 'total': len(data)})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsStaffOrAdmin])
def update_ambulance_request(request, request_id: int):
    s = AmbulanceUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ambulance_service.update_request(
        request.user, request_id,
        status=vd['status'], assigned_staff_id=vd.get('assigned_staff_id'), notes=vd.get('notes'),
    )
    return Response({'message': 'Ambulance request updated successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def assign_ambulance_request(request, request_id: int):
    ambulance_service.assign_to_self(request.user, request_id)
    return Response({'message': 'Ambulance request assigned successfully'})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsStaffOrAdmin])
def update_ambulance_status(request, request_id: int):
    s = AmbulanceStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ambulance_service.update_status(request.user, request_id, s.validated_data['status'],
                                    s.validated_data.get('notes'))
    return Response({'message': 'Ambulance request status updated successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffOrAdmin])
def mark_ambulance_read(request, request_id: int):
    ambulance_service.mark_read(request_id)
    return Response({'message': 'Ambulance request marked as read'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def available_hospitals(request):
    """Active hospitals in the calling admin's state (all states for system admins)."""
    return Response(hospitals.directory_for_admin(request.user))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def forward_to_hospital(request):
    s = ForwardSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    hsr, hospital = forwarding.forward_to_hospital(
        request.user, s.validated_data['requestId'], s.validated_data['hospitalId']
    )
    profile = hospital.hospital_profile
    return Response({
        'message': 'Ambulance request forwarded to hospital successfully',
        'serviceRequestId': hsr.id,
        'hospital': {'id': hospital.id, 'name': profile.hospital_name, 'phone': profile.phone_number},
    }, status=status.HTTP_201_CREATED)
