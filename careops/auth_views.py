"""
Authentication views.

Login accepts an email (or username) and password and returns a
simplejwt access/refresh pair together with a summary of the account.
Kept apart from ``careops.authentication`` so that DRF can import the
authentication class without pulling in the views.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.db.models import Q
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from careops.serializers.auth import LoginSerializer
from careops.services.audit import log_action

from .models import User

logger = logging.getLogger(__name__)


def _resolve_account(login: str):
    return User.objects.filter(Q(email__iexact=login) | Q(username=login)).first()


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    login = s.validated_data['login']
    password = s.validated_data['password']

    account = _resolve_account(login)
    user = authenticate(request, username=account.username, password=password) if account else None
    if user is None:
        if account is not None and account.status == User.STATUS_SUSPENDED and account.check_password(password):
            logger.info('Login refused for suspended user %s', account.id)
            return Response({'error': 'Your account has been suspended. Please contact support.'}, status=400)
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'login': login, 'ip': request.META.get('REMOTE_ADDR')})
        return Response({'error': 'Invalid email or password'}, status=400)
    if user.status == User.STATUS_SUSPENDED:
        return Response({'error': 'Your account has been suspended. Please contact support.'}, status=400)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    return Response({
        'access': str(refresh.access_token),
        'refresh': str(refresh),
        'user': {
            'id': user.id,
            'username': user.username,
            'email': user.email,
            'full_name': user.full_name,
            'role': user.role,
            'status': user.status,
        },
    })

# ScopedRateThrottle reads throttle_scope from the wrapped view class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    s = TokenRefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(s.validated_data)
