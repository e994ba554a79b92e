from datetime import date, datetime, timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from careops.models import AmbulanceRequest, Appointment, FeedbackComplaint, PendingRegistration, User
from careops.services.notifications import FEED_LIMIT, time_ago

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()


def user(username, role, **kw):
    return User.objects.create_user(username=username, email=f'{username}@example.com', password='pass1234',
                                    role=role, full_name=kw.pop('full_name', username.title()), **kw)


def client_for(u):
    c = APIClient()
    c.force_authenticate(user=u)
    return c


def age(obj, minutes):
    type(obj).objects.filter(pk=obj.pk).update(created_at=timezone.now() - timedelta(minutes=minutes))


@pytest.mark.parametrize('seconds, expected', [
    (0, 'Just now'),
    (59, 'Just now'),
    (60, '1 minute ago'),
    (150, '2 minutes ago'),
    (3600, '1 hour ago'),
    (7200 + 59, '2 hours ago'),
    (86400, '1 day ago'),
    (3 * 86400, '3 days ago'),
])
def test_time_ago(seconds, expected):
    now = timezone.now()
    assert time_ago(now - timedelta(seconds=seconds), now) == expected


def test_admin_feed_builds_each_kind():
    admin = user('admin1', 'admin')
    cust = user('cust1', 'customer', full_name='Ravi')
    doc = user('doc1', 'doctor', full_name='Dr Asha')
    a1 = Appointment.objects.create(customer=cust, doctor=doc, reason='fever')
    a2 = Appointment.objects.create(customer=cust, reason='cough')
    Appointment.objects.create(customer=cust, reason='done', status='confirmed')
    reg = PendingRegistration.objects.create(full_name='Neha', email='neha@example.com', role='doctor',
                                             specialization='ENT')
    fc = FeedbackComplaint.objects.create(customer=cust, type='complaint', subject='Late pickup',
                                          category='service', priority='high', status='resolved')
    amb = AmbulanceRequest.objects.create(customer=cust, pickup_address='a', destination_address='b',
                                          emergency_type='Fracture', contact_number='1', priority='critical')
    for obj, minutes in ((a1, 50), (a2, 40), (reg, 30), (fc, 20), (amb, 10)):
        age(obj, minutes)

    r = client_for(admin).get('/api/notifications')
    assert r.status_code == 200
    items = r.data['notifications']
    assert [n['id'] for n in items] == [
        f'ambulance_{amb.id}', f'complaint_{fc.id}', f'registration_{reg.id}',
        f'appointment_{a2.id}', f'appointment_{a1.id}',
    ]
    by_id = {n['id']: n for n in items}
    assert by_id[f'appointment_{a1.id}']['message'] == 'Ravi booked an appointment with Dr Asha for fever'
    assert by_id[f'appointment_{a2.id}']['message'] == 'Ravi booked an appointment needs doctor assignment for cough'
    assert by_id[f'registration_{reg.id}']['title'] == 'Doctor Registration Pending'
    assert by_id[f'registration_{reg.id}']['message'] == 'Neha (ENT) submitted registration for approval'
    complaint = by_id[f'complaint_{fc.id}']
    assert complaint['title'] == 'New Customer Complaint'
    assert complaint['message'] == 'Ravi submitted complaint about service (high priority): Late pickup'
    assert complaint['unread'] is False
    ambulance = by_id[f'ambulance_{amb.id}']
    assert ambulance['message'] == 'Ravi requested ambulance for Fracture (critical priority)'
    assert ambulance['unread'] is True
    assert ambulance['time'] == '10 minutes ago'
    assert ambulance['relatedId'] == amb.id
    assert r.data['total'] == 5
    assert r.data['unreadCount'] == 4


def test_admin_feed_is_truncated_newest_first():
    staff = user('staff1', 'staff')
    cust = user('cust1', 'customer')
    for i in range(10):
        age(Appointment.objects.create(customer=cust, reason=f'r{i}'), 100 + i)
    for i in range(5):
        age(PendingRegistration.objects.create(full_name=f'p{i}', email=f'p{i}@example.com', role='staff'), 200 + i)
    for i in range(10):
        age(FeedbackComplaint.objects.create(customer=cust, subject=f's{i}', category='c'), 300 + i)
    # rows beyond each source's limit never show up
    old = PendingRegistration.objects.create(full_name='old', email='old@example.com', role='staff')
    age(old, 1000)

    r = client_for(staff).get('/api/notifications')
    assert r.status_code == 200
    items = r.data['notifications']
    assert len(items) == FEED_LIMIT == r.data['total']
    stamps = [datetime.fromisoformat(n['createdAt']) for n in items]
    assert stamps == sorted(stamps, reverse=True)
    assert items[-1]['id'].startswith('complaint_')
    assert f'registration_{old.id}' not in [n['id'] for n in items]
    assert r.data['unreadCount'] == sum(1 for n in items if n['unread'])


def test_customer_cannot_read_admin_feed():
    r = client_for(user('cust1', 'customer')).get('/api/notifications')
    assert r.status_code == 403
    assert r.data['error'] == 'Only admin and staff can view notifications'


def test_customer_feed_includes_status_updates():
    cust = user('cust1', 'customer')
    other = user('cust2', 'customer')
    staff = user('staff1', 'staff', full_name='Sam')
    doc = user('doc1', 'doctor', full_name='Asha')
    fresh = AmbulanceRequest.objects.create(customer=cust, pickup_address='a', destination_address='b',
                                            emergency_type='Asthma', contact_number='1')
    moved = AmbulanceRequest.objects.create(customer=cust, pickup_address='a', destination_address='b',
                                            emergency_type='Burn', contact_number='1', status='assigned',
                                            assigned_staff=staff)
    AmbulanceRequest.objects.filter(pk=moved.pk).update(
        created_at=timezone.now() - timedelta(hours=2), updated_at=timezone.now() - timedelta(minutes=5))
    AmbulanceRequest.objects.create(customer=other, pickup_address='a', destination_address='b',
                                    emergency_type='Other', contact_number='1')
    appt = Appointment.objects.create(customer=cust, doctor=doc, reason='checkup', status='confirmed',
                                      appointment_date=date(2024, 5, 1), appointment_time='10:30')
    age(appt, 60 * 24)

    r = client_for(cust).get('/api/notifications/customer')
    assert r.status_code == 200
    ids = [n['id'] for n in r.data['notifications']]
    assert ids == [
        f'ambulance_created_{fresh.id}',
        f'ambulance_status_{moved.id}_assigned',
        f'ambulance_created_{moved.id}',
        f'appointment_{appt.id}',
    ]
    by_id = {n['id']: n for n in r.data['notifications']}
    assert by_id[f'ambulance_status_{moved.id}_assigned']['message'] == \
        'Your ambulance request has been assigned to Sam.'
    assert by_id[f'appointment_{appt.id}']['message'] == \
        'Your appointment with Dr. Asha for checkup on 2024-05-01 at 10:30 is confirmed.'
    assert by_id[f'appointment_{appt.id}']['time'] == '1 day ago'
    assert r.data['unreadCount'] == 4


def test_status_update_after_dispatch_change():
    cust = user('cust1', 'customer')
    staff = user('staff1', 'staff')
    req = AmbulanceRequest.objects.create(customer=cust, pickup_address='a', destination_address='b',
                                          emergency_type='Asthma', contact_number='1', assigned_staff=staff,
                                          status='assigned')
    r = client_for(staff).put(f'/api/ambulance/{req.id}/status', {'status': 'on_the_way'}, format='json')
    assert r.status_code == 200
    r = client_for(cust).get('/api/notifications/customer')
    messages = [n['message'] for n in r.data['notifications']]
    assert 'The ambulance is on the way to your location. Please be ready.' in messages


def test_read_endpoints_are_acknowledged():
    c = client_for(user('admin1', 'admin'))
    assert c.post('/api/notifications/ambulance_3/read').data['message'] == 'Notification marked as read'
    assert c.post('/api/notifications/read-all').data['message'] == 'All notifications marked as read'
