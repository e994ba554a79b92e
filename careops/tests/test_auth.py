import pytest
from django.core.cache import cache
from django.urls import reverse
from rest_framework.test import APIClient

from careops.models import User

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def _clear_throttles():
    cache.clear()


def make_user(username, role='customer', password='secret1', **extra):
    return User.objects.create_user(username=username, email=f'{username}@example.com',
                                    password=password, role=role, full_name=username.title(), **extra)


def test_login_with_email_returns_jwt_pair():
    client = APIClient()
    u = make_user('alice')
    r = client.post(reverse('login_view'), {'email': 'alice@example.com', 'password': 'secret1'}, format='json')
    assert r.status_code == 200
    assert r.data['access'] and r.data['refresh']
    assert r.data['user']['id'] == u.id
    assert r.data['user']['role'] == 'customer'


def test_login_role_field_is_ignored():
    client = APIClient()
    make_user('bob')
    r = client.post(reverse('login_view'), {'username': 'bob', 'password': 'secret1', 'role': 'admin'}, format='json')
    assert r.status_code == 200
    assert r.data['user']['role'] == 'customer'


def test_wrong_password_is_rejected():
    client = APIClient()
    make_user('carol')
    r = client.post(reverse('login_view'), {'email': 'carol@example.com', 'password': 'nope'}, format='json')
    assert r.status_code == 400
    assert r.data['error'] == 'Invalid email or password'


def test_missing_credentials():
    client = APIClient()
    r = client.post(reverse('login_view'), {'password': 'secret1'}, format='json')
    assert r.status_code == 400
    assert r.data['error'] == 'Email and password are required'


def test_suspended_user_cannot_login():
    client = APIClient()
    make_user('dave', status=User.STATUS_SUSPENDED, is_active=False)
    r = client.post(reverse('login_view'), {'email': 'dave@example.com', 'password': 'secret1'}, format='json')
    assert r.status_code == 400
    assert 'suspended' in r.data['error']


def test_bearer_token_grants_access_until_suspended():
    client = APIClient()
    admin = make_user('root', role='admin')
    r = client.post(reverse('login_view'), {'email': 'root@example.com', 'password': 'secret1'}, format='json')
    assert r.status_code == 200
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['access']}")
    assert client.get('/api/admin/users').status_code == 200

    User.objects.filter(pk=admin.pk).update(status=User.STATUS_SUSPENDED)
    assert client.get('/api/admin/users').status_code == 401


def test_refresh_issues_new_access_token():
    client = APIClient()
    make_user('erin')
    r = client.post(reverse('login_view'), {'email': 'erin@example.com', 'password': 'secret1'}, format='json')
    r2 = client.post(reverse('jwt_refresh'), {'refresh': r.data['refresh']}, format='json')
    assert r2.status_code == 200
    assert r2.data['access']


def test_requests_without_token_are_unauthorised():
    client = APIClient()
    assert client.get('/api/ambulance').status_code == 401
    r = client.get('/api/notifications')
    assert r.status_code == 401
    assert 'error' in r.data
