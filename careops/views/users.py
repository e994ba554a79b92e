"""
Admin user-management endpoints.

All handlers are restricted to administrators.  User ids arrive as
path strings so that a malformed id yields ``Invalid user ID`` rather
than a routing 404.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import User
from ..permissions import IsAdminRole
from ..serializers.users import AdminCreateSerializer, DoctorCreateSerializer, PasswordResetSerializer
from ..services import users as user_service


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def list_users(request):
    users = user_service.list_users()
    return Response({'users': users, 'total': len(users), 'message': 'Users retrieved successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def list_users_by_role(request, role: str):
    users = user_service.list_users(role)
    return Response({'users': users, 'total': len(users), 'role': role,
                     'message': f'{role}s retrieved successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def suspend_user(request, user_id: str):
    user = user_service.suspend_user(request.user, user_id)
    return Response({'message': 'User suspended successfully', 'userId': user.id})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def reactivate_user(request, user_id: str):
    user = user_service.reactivate_user(request.user, user_id)
    return Response({'message': 'User reactivated successfully', 'userId': user.id})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def delete_user(request, user_id: str):
    user_service.delete_user(request.user, user_id)
    return Response({'message': 'User deleted successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def reset_password(request, user_id: str):
    # id is checked before the body so a bad id always wins
    user_service.parse_user_id(user_id)
    s = PasswordResetSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = user_service.reset_password(request.user, user_id, vd['password'], vd.get('confirmPassword'))
    return Response({'message': 'Password reset successfully', 'userId': user.id})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def add_doctor(request):
    s = DoctorCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, profile = user_service.create_doctor(request.user, s.validated_data)
    return Response({
        'message': f'Doctor {user.full_name} has been successfully added and activated',
        'doctor': {
            'id': user.id,
            'doctor_id': profile.id,
            'full_name': user.full_name,
            'email': user.email,
            'phone': user.phone,
            'specialization': profile.specialization,
            'experience_years': profile.experience_years,
            'consultation_fee': str(profile.consultation_fee) if profile.consultation_fee is not None else None,
            'available_days': profile.available_days,
            'status': user.status,
        },
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def create_admin(request):
    s = AdminCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user: User = user_service.create_admin(request.user, s.validated_data)
    meta = user.admin_metadata
    return Response({
        'message': 'Admin user created successfully',
        'admin': {
            'id': user.id,
            'full_name': user.full_name,
            'email': user.email,
            'role': user.role,
            'state': meta.state,
            'district': meta.district,
        },
    }, status=status.HTTP_201_CREATED)
