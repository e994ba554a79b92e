from io import StringIO

import pytest
from django.core.cache import cache
from django.core.management import call_command
from rest_framework.test import APIClient, APIRequestFactory

from careops.exceptions import api_exception_handler
from careops.models import AdminMetadata, HospitalProfile, User
from careops.services.hospitals import cache_key

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()


def test_healthz():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


def test_ensure_test_users_is_idempotent():
    out = StringIO()
    call_command('ensure_test_users', stdout=out)
    call_command('ensure_test_users', '--password', 'changed1', stdout=out)
    assert 'All test users ensured.' in out.getvalue()
    assert User.objects.filter(username__in=['sysadmin', 'stateadmin', 'staff1', 'doctor1',
                                             'customer1', 'hospital1']).count() == 6
    assert User.objects.get(username='staff1').check_password('changed1')
    assert AdminMetadata.objects.get(user__username='stateadmin').state == 'Kerala'
    assert AdminMetadata.objects.get(user__username='sysadmin').state is None
    assert HospitalProfile.objects.filter(user__username='hospital1').exists()


def test_refresh_caches_warms_directory():
    call_command('ensure_test_users', stdout=StringIO())
    out = StringIO()
    call_command('refresh_caches', stdout=out)
    assert 'Refreshed 2 keys' in out.getvalue()
    cached = cache.get(cache_key('Kerala'))
    assert [h['hospital_name'] for h in cached] == ['City General']
    assert cache.get(cache_key(None)) == cached


def test_unhandled_errors_become_generic_500():
    request = APIRequestFactory().get('/api/anything')
    resp = api_exception_handler(RuntimeError('boom'), {'request': request})
    assert resp.status_code == 500
    assert resp.data == {'error': 'Internal server error'}


def test_validation_errors_keep_field_detail():
    from rest_framework.exceptions import ValidationError

    resp = api_exception_handler(ValidationError({'email': ['Invalid email format']}), {})
    assert resp.status_code == 400
    assert resp.data['error'] == 'Invalid email format'
    assert resp.data['fields'] == {'email': ['Invalid email format']}
