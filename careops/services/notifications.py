"""
Notification feeds.

Nothing is stored: each feed is assembled on request from the
appointments, pending registrations, feedback/complaints and ambulance
tables, merged newest first and cut to :data:`FEED_LIMIT` entries.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from django.db.models.functions import Coalesce
from django.utils import timezone

from careops.models import AmbulanceRequest, Appointment, FeedbackComplaint, PendingRegistration, User

FEED_LIMIT = 20

STATUS_UPDATE_MESSAGES = {
    'on_the_way': 'The ambulance is on the way to your location. Please be ready.',
    'completed': 'Your ambulance service has been completed. Thank you for using our services.',
    'cancelled': 'Your ambulance request has been cancelled.',
}


def time_ago(then: datetime, now: Optional[datetime] = None) -> str:
    """Humanised age such as ``5 minutes ago``."""
    now = now or timezone.now()
    seconds = int((now - then).total_seconds())
    if seconds < 60:
        return 'Just now'
    if seconds < 3600:
        n, unit = seconds // 60, 'minute'
    elif seconds < 86400:
        n, unit = seconds // 3600, 'hour'
    else:
        n, unit = seconds // 86400, 'day'
    return f"{n} {unit}{'s' if n > 1 else ''} ago"


def _item(*, id: str, type: str, title: str, message: str, unread: bool, related_id: int,
          created_at: datetime, now: datetime) -> dict:
    return {
        'id': id,
        'type': type,
        'title': title,
        'message': message,
        'time': time_ago(created_at, now),
        'unread': unread,
        'relatedId': related_id,
        'createdAt': created_at.isoformat(),
        '_ts': created_at,
    }


def _finish(items: list[dict]) -> dict:
    items.sort(key=lambda n: n['_ts'], reverse=True)
    items = items[:FEED_LIMIT]
    for n in items:
        del n['_ts']
    return {
        'notifications': items,
        'total': len(items),
        'unreadCount': sum(1 for n in items if n['unread']),
    }


def admin_feed(now: Optional[datetime] = None) -> dict:
    now = now or timezone.now()
    items: list[dict] = []

    appointments = (Appointment.objects.filter(status='pending')
                    .select_related('customer', 'doctor').order_by('-created_at', '-id')[:10])
    for a in appointments:
        doctor_text = f'with {a.doctor.full_name}' if a.doctor else 'needs doctor assignment'
        items.append(_item(
            id=f'appointment_{a.id}', type='appointment', title='New Appointment Booking',
            message=f'{a.customer.full_name} booked an appointment {doctor_text} for {a.reason}',
            unread=True, related_id=a.id, created_at=a.created_at, now=now,
        ))

    for r in PendingRegistration.objects.filter(status='pending').order_by('-created_at', '-id')[:5]:
        role_text = 'Doctor' if r.role == 'doctor' else 'Staff'
        spec = f' ({r.specialization})' if r.specialization else ''
        items.append(_item(
            id=f'registration_{r.id}', type='registration', title=f'{role_text} Registration Pending',
            message=f'{r.full_name}{spec} submitted registration for approval',
            unread=True, related_id=r.id, created_at=r.created_at, now=now,
        ))

    for c in FeedbackComplaint.objects.select_related('customer').order_by('-created_at', '-id')[:10]:
        type_text = 'Complaint' if c.type == 'complaint' else 'Feedback'
        prio = f' ({c.priority} priority)' if c.priority in ('high', 'urgent') else ''
        items.append(_item(
            id=f'complaint_{c.id}', type='complaint', title=f'New Customer {type_text}',
            message=f'{c.customer.full_name} submitted {c.type} about {c.category}{prio}: {c.subject}',
            unread=c.status == 'pending', related_id=c.id, created_at=c.created_at, now=now,
        ))

    ambulances = (AmbulanceRequest.objects.select_related('customer')
                  .annotate(last_change=Coalesce('updated_at', 'created_at'))
                  .order_by('-last_change', '-id')[:10])
    for r in ambulances:
        urgency = f' ({r.priority} priority)' if r.priority in ('critical', 'high') else ''
        items.append(_item(
            id=f'ambulance_{r.id}', type='ambulance', title='Emergency Ambulance Request',
            message=f'{r.customer.full_name} requested ambulance for {r.emergency_type}{urgency}',
            unread=r.status == AmbulanceRequest.STATUS_PENDING, related_id=r.id,
            created_at=r.created_at, now=now,
        ))

    return _finish(items)


def _status_message(r: AmbulanceRequest) -> Optional[str]:
    if r.status == AmbulanceRequest.STATUS_ASSIGNED:
        staff = r.assigned_staff.full_name if r.assigned_staff and r.assigned_staff.full_name else 'our staff'
        return f'Your ambulance request has been assigned to {staff}.'
    return STATUS_UPDATE_MESSAGES.get(r.status)


def customer_feed(customer: User, now: Optional[datetime] = None) -> dict:
    now = now or timezone.now()
    items: list[dict] = []

    ambulances = (AmbulanceRequest.objects.filter(customer=customer).select_related('assigned_staff')
                  .annotate(last_change=Coalesce('updated_at', 'created_at'))
                  .order_by('-last_change', '-id')[:20])
    for r in ambulances:
        items.append(_item(
            id=f'ambulance_created_{r.id}', type='ambulance', title='Ambulance Request Submitted',
            message=f'Your ambulance request for {r.emergency_type} has been submitted and is being processed.',
            unread=True, related_id=r.id, created_at=r.created_at, now=now,
        ))
        if r.updated_at and r.updated_at != r.created_at:
            msg = _status_message(r)
            if msg:
                items.append(_item(
                    id=f'ambulance_status_{r.id}_{r.status}', type='ambulance', title='Ambulance Status Update',
                    message=msg, unread=True, related_id=r.id, created_at=r.updated_at, now=now,
                ))

    appointments = (Appointment.objects.filter(customer=customer).select_related('doctor')
                    .order_by('-created_at', '-id')[:10])
    for a in appointments:
        parts = ['Your appointment']
        if a.doctor:
            parts.append(f'with Dr. {a.doctor.full_name}')
        parts.append(f'for {a.reason} on {a.appointment_date} at {a.appointment_time} is {a.status}.')
        items.append(_item(
            id=f'appointment_{a.id}', type='appointment', title='Appointment Confirmation',
            message=' '.join(parts), unread=True, related_id=a.id, created_at=a.created_at, now=now,
        ))

    return _finish(items)
