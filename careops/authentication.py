"""
Bearer token authentication.

This module defines a subclass of simplejwt's ``JWTAuthentication``
that additionally refuses suspended accounts.  Keeping it apart from
the views avoids circular imports when the REST framework imports
authentication classes during initialisation.
"""
from __future__ import annotations

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication


class BearerJWTAuthentication(JWTAuthentication):
    """``Authorization: Bearer <access>`` with a suspension check."""

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if getattr(user, 'status', 'active') == 'suspended':
            raise exceptions.AuthenticationFailed('Account suspended', code='user_suspended')
        return user
