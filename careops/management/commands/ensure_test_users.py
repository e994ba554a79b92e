# careops/management/commands/ensure_test_users.py
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction

from careops.models import AdminMetadata, CustomerProfile, DoctorProfile, HospitalProfile, User
from careops.services.hospitals import invalidate_directory

# username, role, full name, phone
TEST_SET = [
    ("sysadmin", User.ROLE_ADMIN, "System Admin", "9000000001"),
    ("stateadmin", User.ROLE_ADMIN, "Kerala Admin", "9000000002"),
    ("staff1", User.ROLE_STAFF, "Dispatch Staff", "9000000003"),
    ("doctor1", User.ROLE_DOCTOR, "Asha Menon", "9000000004"),
    ("customer1", User.ROLE_CUSTOMER, "Ravi Kumar", "9000000005"),
    ("hospital1", User.ROLE_HOSPITAL, "City General", "9000000006"),
]
DEMO_STATE = "Kerala"
DEMO_DISTRICT = "Ernakulam"


class Command(BaseCommand):
    help = "Ensure demo users for every role exist with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="123456")

    @transaction.atomic
    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for username, role, full_name, phone in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={
                    "role": role, "password": password, "is_active": True,
                    "email": f"{username}@example.com", "full_name": full_name, "phone": phone,
                },
            )
            if not created:
                # reset password, status and role
                u.password = password
                u.role = role
                u.status = User.STATUS_ACTIVE
                u.is_active = True
                u.save(update_fields=["password", "role", "status", "is_active"])
            self._ensure_profile(u)
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        invalidate_directory()
        self.stdout.write(self.style.SUCCESS("All test users ensured."))

    def _ensure_profile(self, u: User):
        if u.role == User.ROLE_ADMIN:
            state = DEMO_STATE if u.username == "stateadmin" else None
            AdminMetadata.objects.update_or_create(
                user=u, defaults={"state": state, "district": DEMO_DISTRICT if state else None}
            )
        elif u.role == User.ROLE_HOSPITAL:
            HospitalProfile.objects.get_or_create(user=u, defaults={
                "hospital_name": u.full_name, "address": "MG Road", "state": DEMO_STATE,
                "district": DEMO_DISTRICT, "hospital_type": "general", "number_of_ambulances": 3,
                "phone_number": u.phone or "",
            })
        elif u.role == User.ROLE_DOCTOR:
            DoctorProfile.objects.get_or_create(user=u, defaults={"specialization": "General Medicine"})
        elif u.role == User.ROLE_CUSTOMER:
            CustomerProfile.objects.get_or_create(user=u, defaults={"address": "Marine Drive, Kochi"})
