"""
Account administration.

Helpers used by the admin user-management endpoints.  Every function
raises DRF exceptions with the exact message shown to the admin client;
views only translate the result into a response.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from careops.models import AdminMetadata, AmbulanceRequest, DoctorProfile, User
from careops.services.audit import log_action
from careops.services.hospitals import invalidate_directory

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_RE = re.compile(r'^[0-9]{10}$')
MIN_PASSWORD_LENGTH = 6
LISTABLE_ROLES = (User.ROLE_DOCTOR, User.ROLE_CUSTOMER, User.ROLE_STAFF)
DUPLICATE_CONTACT = 'Mobile or Email already in use'


def serialize_user(u: User) -> dict:
    return {
        'id': u.id,
        'username': u.username,
        'full_name': u.full_name,
        'email': u.email,
        'phone': u.phone,
        'role': u.role,
        'status': u.status,
        'created_at': u.date_joined.isoformat() if u.date_joined else None,
    }


def list_users(role: Optional[str] = None) -> list[dict]:
    qs = User.objects.all()
    if role is not None:
        if role not in LISTABLE_ROLES:
            raise ValidationError('Invalid role specified')
        qs = qs.filter(role=role)
    return [serialize_user(u) for u in qs.order_by('-date_joined', '-id')]


def parse_user_id(raw) -> int:
    try:
        user_id = int(str(raw))
    except (TypeError, ValueError):
        raise ValidationError('Invalid user ID')
    if user_id <= 0:
        raise ValidationError('Invalid user ID')
    return user_id


def get_user(raw_id) -> User:
    user = User.objects.filter(id=parse_user_id(raw_id)).first()
    if user is None:
        raise NotFound('User not found')
    return user


def validate_email(email: str) -> str:
    email = (email or '').strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError('Invalid email format')
    return email


def validate_password(password: str) -> str:
    if len(password or '') < MIN_PASSWORD_LENGTH:
        raise ValidationError('Password must be at least 6 characters long')
    return password


def validate_phone(phone: Optional[str]) -> Optional[str]:
    phone = (phone or '').strip()
    if not phone:
        return None
    if not PHONE_RE.match(phone):
        raise ValidationError('Mobile number must be exactly 10 digits')
    return phone


def _username_from_email(email: str) -> str:
    base = email.split('@')[0][:140] or 'user'
    candidate, n = base, 1
    while User.objects.filter(username=candidate).exists():
        n += 1
        candidate = f"{base}{n}"
    return candidate


def _set_status(actor: User, raw_id, status: str) -> User:
    user = get_user(raw_id)
    if status == User.STATUS_SUSPENDED and user.pk == actor.pk:
        raise ValidationError('You cannot suspend your own account')
    user.status = status
    user.is_active = status == User.STATUS_ACTIVE
    user.save(update_fields=['status', 'is_active'])
    if user.role == User.ROLE_HOSPITAL:
        invalidate_directory()
    log_action(user=actor, action=f'user.{status}', object_type='user', object_id=user.id)
    logger.info('User %s set to %s by admin %s', user.id, status, actor.id)
    return user


def suspend_user(actor: User, raw_id) -> User:
    return _set_status(actor, raw_id, User.STATUS_SUSPENDED)


def reactivate_user(actor: User, raw_id) -> User:
    return _set_status(actor, raw_id, User.STATUS_ACTIVE)


def _release_forwarded_requests(hospital: User) -> int:
    """Put requests still waiting on ``hospital`` back in the admin queue."""
    return (AmbulanceRequest.objects
            .filter(forwarded_to_hospital=hospital, status=AmbulanceRequest.STATUS_FORWARDED)
            .update(status=AmbulanceRequest.STATUS_PENDING, forwarded_to_hospital=None,
                    hospital_request=None, is_read=False, updated_at=timezone.now()))


def delete_user(actor: User, raw_id) -> None:
    user = get_user(raw_id)
    if user.role == User.ROLE_ADMIN:
        raise PermissionDenied('Cannot delete admin user')
    user_id = user.id
    with transaction.atomic():
        released = 0
        if user.role == User.ROLE_HOSPITAL:
            released = _release_forwarded_requests(user)
        user.delete()
    if user.role == User.ROLE_HOSPITAL:
        invalidate_directory()
        if released:
            logger.info('%s forwarded request(s) of hospital %s returned to pending', released, user_id)
    log_action(user=actor, action='user.delete', object_type='user', object_id=user_id)
    logger.info('User %s deleted by admin %s', user_id, actor.id)


def reset_password(actor: User, raw_id, password: str, confirm: Optional[str] = None) -> User:
    user = get_user(raw_id)
    validate_password(password)
    if confirm is not None and confirm != password:
        raise ValidationError('Passwords do not match')
    user.set_password(password)
    user.save(update_fields=['password'])
    log_action(user=actor, action='user.reset_password', object_type='user', object_id=user.id)
    logger.info('Password reset for user %s by admin %s', user.id, actor.id)
    return user


def create_doctor(actor: User, data: dict) -> tuple[User, DoctorProfile]:
    """Create an active doctor account and its profile.

    Admin-created doctors skip the registration approval queue.
    """
    email = validate_email(data['email'])
    validate_password(data['password'])
    phone = validate_phone(data.get('phone'))
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError(DUPLICATE_CONTACT)
    if phone and User.objects.filter(phone=phone).exists():
        raise ValidationError(DUPLICATE_CONTACT)
    try:
        with transaction.atomic():
            user = User(
                username=_username_from_email(email),
                email=email,
                full_name=data['full_name'],
                phone=phone,
                role=User.ROLE_DOCTOR,
                status=User.STATUS_ACTIVE,
            )
            user.set_password(data['password'])
            user.save()
            profile = DoctorProfile.objects.create(
                user=user,
                specialization=data.get('specialization') or None,
                experience_years=data.get('experience_years'),
                consultation_fee=data.get('consultation_fee'),
                available_days=data.get('available_days') or None,
                bio=data.get('bio') or None,
            )
    except IntegrityError:
        raise ValidationError(DUPLICATE_CONTACT)
    log_action(user=actor, action='doctor.create', object_type='user', object_id=user.id)
    logger.info('Doctor %s (%s) created by admin %s', user.id, email, actor.id)
    return user, profile


def create_admin(actor: User, data: dict) -> User:
    email = validate_email(data['email'])
    if len(data['password']) < MIN_PASSWORD_LENGTH:
        raise ValidationError('Password must be at least 6 characters')
    if data['password'] != data['confirmPassword']:
        raise ValidationError('Passwords do not match')
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError('Email already in use')
    try:
        with transaction.atomic():
            user = User(
                username=_username_from_email(email),
                email=email,
                full_name=data['full_name'],
                role=User.ROLE_ADMIN,
                status=User.STATUS_ACTIVE,
            )
            user.set_password(data['password'])
            user.save()
            AdminMetadata.objects.create(
                user=user,
                state=data['state'].strip(),
                district=data['district'].strip(),
                created_by=actor,
            )
    except IntegrityError:
        raise ValidationError('Email already in use')
    log_action(user=actor, action='admin.create', object_type='user', object_id=user.id,
               detail={'state': data['state'], 'district': data['district']})
    logger.info('Admin %s created for %s/%s by admin %s', user.id, data['state'], data['district'], actor.id)
    return user
