"""
Forwarding ambulance requests to hospitals and the hospitals' answers.

Forwarding creates a :class:`HospitalServiceRequest` and links it back
to the ambulance request.  Both rows change in one transaction with the
ambulance row locked, so a request can only be forwarded once while it
is pending.  A hospital rejection only closes the service request; the
ambulance request stays forwarded until an admin forwards it again.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from careops.models import AmbulanceRequest, HospitalServiceRequest, User
from careops.services.ambulance import get_request
from careops.services.audit import log_action
from careops.services.events import broadcast_refresh

logger = logging.getLogger(__name__)

SERVICE_TYPE = 'Ambulance Request'


def _hospital(hospital_id: int) -> User:
    hospital = (User.objects.filter(id=hospital_id, role=User.ROLE_HOSPITAL, hospital_profile__isnull=False)
                .select_related('hospital_profile').first())
    if hospital is None:
        raise NotFound('Hospital not found')
    return hospital


def _forwardable(req: AmbulanceRequest) -> bool:
    """Pending, or forwarded to a hospital that has since rejected it."""
    if req.status == AmbulanceRequest.STATUS_PENDING:
        return True
    return (req.status == AmbulanceRequest.STATUS_FORWARDED and req.hospital_request is not None
            and req.hospital_request.status == HospitalServiceRequest.STATUS_REJECTED)


def forward_to_hospital(admin: User, request_id: int, hospital_id: int) -> tuple[HospitalServiceRequest, User]:
    with transaction.atomic():
        req = get_request(request_id, lock=True)
        hospital = _hospital(hospital_id)
        if not _forwardable(req):
            raise ValidationError(f'Only pending requests can be forwarded (current status: {req.status})')
        hsr = HospitalServiceRequest.objects.create(
            hospital=hospital,
            customer_id=req.customer_id,
            admin=admin,
            ambulance_request=req,
            service_type=SERVICE_TYPE,
            description=f'Emergency ambulance request - {req.emergency_type}',
            status=HospitalServiceRequest.STATUS_PENDING,
            priority=req.priority,
        )
        req.status = AmbulanceRequest.STATUS_FORWARDED
        req.forwarded_to_hospital = hospital
        req.hospital_request = hsr
        req.is_read = True
        req.updated_at = timezone.now()
        req.save(update_fields=['status', 'forwarded_to_hospital', 'hospital_request', 'is_read', 'updated_at'])
    log_action(user=admin, action='ambulance.forward', object_type='ambulance_request', object_id=req.id,
               detail={'hospital_id': hospital.id, 'service_request_id': hsr.id})
    logger.info('Ambulance request %s forwarded to hospital %s (service request %s)', req.id, hospital.id, hsr.id)
    broadcast_refresh([f'ambulance:{req.id}', f'hospital:{hospital.id}:service-requests'])
    return hsr, hospital


def serialize_service_request(s: HospitalServiceRequest) -> dict:
    customer, admin, amb = s.customer, s.admin, s.ambulance_request
    return {
        'id': s.id,
        'hospital_user_id': s.hospital_id,
        'customer_user_id': s.customer_id,
        'admin_user_id': s.admin_id,
        'ambulance_request_id': s.ambulance_request_id,
        'service_type': s.service_type,
        'description': s.description,
        'status': s.status,
        'priority': s.priority,
        'hospital_response': s.hospital_response,
        'hospital_response_at': s.hospital_response_at.isoformat() if s.hospital_response_at else None,
        'notes': s.notes,
        'created_at': s.created_at.isoformat() if s.created_at else None,
        'updated_at': s.updated_at.isoformat() if s.updated_at else None,
        'customer_name': customer.full_name if customer else None,
        'customer_email': customer.email if customer else None,
        'customer_phone': customer.phone if customer else None,
        'admin_name': admin.full_name if admin else None,
        'admin_email': admin.email if admin else None,
        'pickup_address': amb.pickup_address if amb else None,
        'emergency_type': amb.emergency_type if amb else None,
        'request_priority': amb.priority if amb else None,
    }


def service_requests_for(hospital: User) -> list[dict]:
    qs = (HospitalServiceRequest.objects.filter(hospital=hospital)
          .select_related('customer', 'admin', 'ambulance_request')
          .order_by('-created_at', '-id'))
    return [serialize_service_request(s) for s in qs]


def _respond(hospital: User, service_request_id: int, *, accept: bool, notes: Optional[str]) -> HospitalServiceRequest:
    verb = 'accept' if accept else 'reject'
    with transaction.atomic():
        hsr = HospitalServiceRequest.objects.select_for_update().filter(id=service_request_id).first()
        if hsr is None:
            raise NotFound('Service request not found')
        if hsr.hospital_id != hospital.id:
            raise PermissionDenied(f'You cannot {verb} requests for other hospitals')
        if hsr.status != HospitalServiceRequest.STATUS_PENDING:
            raise ValidationError(f'Service request has already been {hsr.status}')
        now = timezone.now()
        hsr.status = HospitalServiceRequest.STATUS_ACCEPTED if accept else HospitalServiceRequest.STATUS_REJECTED
        hsr.hospital_response = 'ACCEPTED' if accept else 'REJECTED'
        hsr.hospital_response_at = now
        hsr.notes = notes
        hsr.save(update_fields=['status', 'hospital_response', 'hospital_response_at', 'notes', 'updated_at'])

        # a rejection leaves the ambulance request forwarded until an admin re-forwards it
        if accept and hsr.ambulance_request_id:
            amb = AmbulanceRequest.objects.select_for_update().filter(id=hsr.ambulance_request_id).first()
            if amb is not None:
                amb.status = AmbulanceRequest.STATUS_ASSIGNED
                amb.updated_at = now
                amb.save(update_fields=['status', 'updated_at'])
    log_action(user=hospital, action=f'service_request.{verb}', object_type='hospital_service_request',
               object_id=hsr.id, detail={'ambulance_request_id': hsr.ambulance_request_id})
    logger.info('Hospital %s %sed service request %s', hospital.id, verb, hsr.id)
    keys = [f'hospital:{hospital.id}:service-requests']
    if hsr.ambulance_request_id:
        keys.append(f'ambulance:{hsr.ambulance_request_id}')
    broadcast_refresh(keys)
    return hsr


def accept_service_request(hospital: User, service_request_id: int, notes: Optional[str] = None) -> HospitalServiceRequest:
    return _respond(hospital, service_request_id, accept=True, notes=notes)


def reject_service_request(hospital: User, service_request_id: int, notes: Optional[str] = None) -> HospitalServiceRequest:
    return _respond(hospital, service_request_id, accept=False, notes=notes)
