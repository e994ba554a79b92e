"""
Ambulance request intake and dispatch.

Customers submit requests; staff and admins work the dispatch board.
The board is ordered by urgency first and age second so that the most
critical and most recent requests are on top.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from careops.models import AmbulanceRequest, User
from careops.services.audit import log_action

logger = logging.getLogger(__name__)

PRIORITY_RANK = {'critical': 1, 'high': 2, 'normal': 3, 'low': 4}
DEFAULT_RANK = PRIORITY_RANK['normal']


def priority_rank(priority: Optional[str]) -> int:
    return PRIORITY_RANK.get((priority or '').lower(), DEFAULT_RANK)


def sort_for_dispatch(requests: list[AmbulanceRequest]) -> list[AmbulanceRequest]:
    # two stable passes: newest first, then by priority rank
    ordered = sorted(requests, key=lambda r: (r.created_at, r.id), reverse=True)
    return sorted(ordered, key=lambda r: priority_rank(r.priority))


def _iso(dt):
    return dt.isoformat() if dt else None


def _base(r: AmbulanceRequest) -> dict:
    staff = r.assigned_staff
    return {
        'id': r.id,
        'pickup_address': r.pickup_address,
        'destination_address': r.destination_address,
        'emergency_type': r.emergency_type,
        'customer_condition': r.customer_condition,
        'contact_number': r.contact_number,
        'status': r.status,
        'priority': r.priority,
        'notes': r.notes,
        'is_read': r.is_read,
        'created_at': _iso(r.created_at),
        'updated_at': _iso(r.updated_at),
        'assigned_staff_id': r.assigned_staff_id,
        'assigned_staff_name': staff.full_name if staff else None,
        'assigned_staff_phone': staff.phone if staff else None,
        'forwarded_to_hospital_id': r.forwarded_to_hospital_id,
        'hospital_request_id': r.hospital_request_id,
    }


def serialize_for_board(r: AmbulanceRequest) -> dict:
    data = _base(r)
    patient = r.customer
    profile = getattr(patient, 'customer_profile', None)
    data.update({
        'patient_name': patient.full_name,
        'patient_email': patient.email,
        'patient_phone': patient.phone,
        'customer_signup_address': profile.address if profile else None,
        'customer_signup_lat': profile.signup_lat if profile else None,
        'customer_signup_lng': profile.signup_lng if profile else None,
    })
    return data


def serialize_for_customer(r: AmbulanceRequest) -> dict:
    data = _base(r)
    data['customer_user_id'] = r.customer_id
    return data


def create_request(customer: User, data: dict) -> AmbulanceRequest:
    req = AmbulanceRequest.objects.create(
        customer=customer,
        pickup_address=data['pickup_address'],
        destination_address=data['destination_address'],
        emergency_type=data['emergency_type'],
        customer_condition=data.get('customer_condition'),
        contact_number=data['contact_number'],
        priority=data.get('priority') or 'normal',
    )
    logger.info('Ambulance request %s created for customer %s (%s)', req.id, customer.id, req.priority)
    return req


def dispatch_board() -> list[dict]:
    qs = AmbulanceRequest.objects.select_related(
        'customer', 'customer__customer_profile', 'assigned_staff'
    )
    return [serialize_for_board(r) for r in sort_for_dispatch(list(qs))]


def customer_requests(customer: User) -> list[dict]:
    qs = (AmbulanceRequest.objects.filter(customer=customer)
          .select_related('assigned_staff')
          .order_by('-created_at', '-id'))
    return [serialize_for_customer(r) for r in qs]


def get_request(request_id: int, *, lock: bool = False) -> AmbulanceRequest:
    qs = AmbulanceRequest.objects.all()
    if lock:
        qs = qs.select_for_update()
    req = qs.filter(id=request_id).first()
    if req is None:
        raise NotFound('Ambulance request not found')
    return req


def update_request(actor: User, request_id: int, *, status: str, assigned_staff_id=None, notes=None) -> AmbulanceRequest:
    """Admin/staff edit of status, assignee and notes."""
    with transaction.atomic():
        req = get_request(request_id, lock=True)
        if assigned_staff_id is not None and not User.objects.filter(
            id=assigned_staff_id, role=User.ROLE_STAFF
        ).exists():
            raise ValidationError('Assigned staff member not found')
        req.status = status
        req.assigned_staff_id = assigned_staff_id
        req.notes = notes
        req.updated_at = timezone.now()
        req.save(update_fields=['status', 'assigned_staff', 'notes', 'updated_at'])
    log_action(user=actor, action='ambulance.update', object_type='ambulance_request', object_id=req.id,
               detail={'status': status, 'assigned_staff_id': assigned_staff_id})
    logger.info('Ambulance request %s updated to %s by %s', req.id, status, actor.id)
    return req


def assign_to_self(staff: User, request_id: int) -> AmbulanceRequest:
    with transaction.atomic():
        req = get_request(request_id, lock=True)
        if req.status != AmbulanceRequest.STATUS_PENDING:
            raise ValidationError('Request is not in pending status')
        if req.assigned_staff_id is not None:
            raise ValidationError('Request is already assigned to another staff member')
        req.assigned_staff = staff
        req.status = AmbulanceRequest.STATUS_ASSIGNED
        req.updated_at = timezone.now()
        req.save(update_fields=['assigned_staff', 'status', 'updated_at'])
    log_action(user=staff, action='ambulance.assign', object_type='ambulance_request', object_id=req.id)
    logger.info('Ambulance request %s self-assigned by staff %s', req.id, staff.id)
    return req


def update_status(actor: User, request_id: int, status: str, notes: Optional[str] = None) -> AmbulanceRequest:
    with transaction.atomic():
        req = get_request(request_id, lock=True)
        if actor.role == User.ROLE_STAFF and req.assigned_staff_id != actor.id:
            raise PermissionDenied('You can only update requests assigned to you')
        req.status = status
        # omitted notes clear the previous ones
        req.notes = notes
        req.updated_at = timezone.now()
        req.save(update_fields=['status', 'notes', 'updated_at'])
    log_action(user=actor, action='ambulance.status', object_type='ambulance_request', object_id=req.id,
               detail={'status': status})
    logger.info('Ambulance request %s moved to %s by %s', req.id, status, actor.id)
    return req


def mark_read(request_id: int) -> AmbulanceRequest:
    req = get_request(request_id)
    if not req.is_read:
        req.is_read = True
        req.save(update_fields=['is_read'])
    return req
