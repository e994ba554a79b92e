"""
Hospital directory used by the forwarding dialog.

Admins bound to a state only see hospitals in that state; an admin
without a state (system admin) sees every active hospital.  Listings
are cached per state under a version key so one bump invalidates all
of them.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.core.cache import cache

from careops.models import AdminMetadata, User

logger = logging.getLogger(__name__)

VERSION_KEY = 'hospitals:version'


def _version() -> int:
    return cache.get_or_set(VERSION_KEY, 1, None)


def cache_key(state: Optional[str]) -> str:
    return f'hospitals:v={_version()}:state={state or "*"}'


def invalidate_directory() -> None:
    try:
        cache.incr(VERSION_KEY)
    except ValueError:
        cache.set(VERSION_KEY, 2, None)
    logger.debug('hospital directory cache invalidated')


def admin_jurisdiction(admin: User) -> tuple[Optional[str], Optional[str]]:
    meta = AdminMetadata.objects.filter(user=admin).first()
    if meta is None:
        return None, None
    return (meta.state or None), (meta.district or None)


def _serialize(u: User) -> dict:
    h = u.hospital_profile
    return {
        'id': u.id,
        'full_name': u.full_name,
        'email': u.email,
        'phone': u.phone,
        'hospital_name': h.hospital_name,
        'address': h.address,
        'state': h.state,
        'district': h.district,
        'hospital_type': h.hospital_type,
        'number_of_ambulances': h.number_of_ambulances,
        'phone_number': h.phone_number,
    }


def list_hospitals(state: Optional[str] = None) -> list[dict]:
    qs = (User.objects.filter(role=User.ROLE_HOSPITAL, status=User.STATUS_ACTIVE,
                              hospital_profile__isnull=False)
          .select_related('hospital_profile'))
    if state:
        qs = qs.filter(hospital_profile__state=state)
    return [_serialize(u) for u in qs.order_by('hospital_profile__hospital_name', 'id')]


def cached_hospitals(state: Optional[str] = None) -> list[dict]:
    key = cache_key(state)
    data = cache.get(key)
    if data is None:
        data = list_hospitals(state)
        cache.set(key, data, settings.HOSPITAL_CACHE_SECONDS)
    return data


def directory_for_admin(admin: User) -> dict:
    state, district = admin_jurisdiction(admin)
    hospitals = cached_hospitals(state)
    return {
        'hospitals': hospitals,
        'total': len(hospitals),
        'adminState': state,
        'adminDistrict': district,
        'isSystemAdmin': state is None,
    }


def warm_directory() -> list[str]:
    """Fill the cache for every state with hospitals plus the unfiltered list."""
    from careops.models import HospitalProfile

    states = (HospitalProfile.objects.exclude(state='')
              .values_list('state', flat=True).distinct())
    keys = []
    for state in [None, *sorted(set(states))]:
        key = cache_key(state)
        cache.set(key, list_hospitals(state), settings.HOSPITAL_CACHE_SECONDS)
        keys.append(key)
    return keys
