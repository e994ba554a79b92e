"""
Database models for the HealthDesk backend.

These models capture the administrative side of the service: user
accounts and their role profiles, ambulance requests raised by
customers, service requests forwarded to hospitals and the tables
feeding the notification feed (appointments, pending registrations,
feedback/complaints).  Table names follow the ones used by the web
client and the reporting queries so raw SQL against the store keeps
working.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Account with a single role and an active/suspended status.

    Suspension also clears ``is_active`` so that token authentication
    rejects the account; :attr:`status` is the value shown to admins.
    """
    ROLE_ADMIN = 'admin'
    ROLE_STAFF = 'staff'
    ROLE_DOCTOR = 'doctor'
    ROLE_CUSTOMER = 'customer'
    ROLE_HOSPITAL = 'hospital'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_STAFF, 'Staff'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_CUSTOMER, 'Customer'),
        (ROLE_HOSPITAL, 'Hospital'),
    ]

    STATUS_ACTIVE = 'active'
    STATUS_SUSPENDED = 'suspended'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_SUSPENDED, 'Suspended'),
    ]

    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_CUSTOMER, db_index=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    full_name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"

    @property
    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username


class AdminMetadata(models.Model):
    """Jurisdiction of an admin account.

    An admin without a state is a system admin and sees hospitals in
    every state.
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='admin_metadata')
    state = models.CharField(max_length=100, blank=True, null=True)
    district = models.CharField(max_length=100, blank=True, null=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='admins_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'admin_metadata'

    def __str__(self) -> str:
        return f"{self.user.username}: {self.state or 'all'}/{self.district or 'all'}"


class HospitalProfile(models.Model):
    """Hospital details attached to a user of role ``hospital``."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='hospital_profile')
    hospital_name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    state = models.CharField(max_length=100, blank=True, db_index=True)
    district = models.CharField(max_length=100, blank=True)
    hospital_type = models.CharField(max_length=50, blank=True)
    number_of_ambulances = models.PositiveIntegerField(default=0)
    phone_number = models.CharField(max_length=20, blank=True)

    class Meta:
        db_table = 'hospitals'

    def __str__(self) -> str:
        return self.hospital_name


class CustomerProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='customer_profile')
    address = models.TextField(blank=True)
    signup_lat = models.CharField(max_length=32, blank=True, null=True)
    signup_lng = models.CharField(max_length=32, blank=True, null=True)

    class Meta:
        db_table = 'customers'

    def __str__(self) -> str:
        return f"customer {self.user_id}"


class DoctorProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor_profile')
    specialization = models.CharField(max_length=255, blank=True, null=True)
    experience_years = models.PositiveIntegerField(null=True, blank=True)
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    available_days = models.CharField(max_length=255, blank=True, null=True)
    bio = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'doctors'

    def __str__(self) -> str:
        return f"doctor {self.user_id} ({self.specialization or '-'})"


class AmbulanceRequest(models.Model):
    """A customer's request for ambulance transport.

    ``updated_at`` stays empty until the first change so that the
    customer feed can tell a status update apart from the submission.
    """
    STATUS_PENDING = 'pending'
    STATUS_FORWARDED = 'forwarded_to_hospital'
    STATUS_ASSIGNED = 'assigned'
    STATUS_ON_THE_WAY = 'on_the_way'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_FORWARDED, 'Forwarded to hospital'),
        (STATUS_ASSIGNED, 'Assigned'),
        (STATUS_ON_THE_WAY, 'On the way'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    PRIORITY_CHOICES = [
        ('critical', 'Critical'),
        ('high', 'High'),
        ('normal', 'Normal'),
        ('low', 'Low'),
    ]

    customer = models.ForeignKey(User, on_delete=models.CASCADE, related_name='ambulance_requests')
    pickup_address = models.TextField()
    destination_address = models.TextField()
    emergency_type = models.CharField(max_length=255)
    customer_condition = models.TextField(blank=True, null=True)
    contact_number = models.CharField(max_length=20)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='normal', db_index=True)
    assigned_staff = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='assigned_ambulance_requests'
    )
    notes = models.TextField(blank=True, null=True)
    forwarded_to_hospital = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='forwarded_ambulance_requests'
    )
    hospital_request = models.ForeignKey(
        'HospitalServiceRequest', null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'ambulance_requests'

    def __str__(self) -> str:
        return f"Ambulance #{self.pk} ({self.status})"


class HospitalServiceRequest(models.Model):
    """An ambulance request forwarded by an admin to a hospital."""
    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    hospital = models.ForeignKey(User, on_delete=models.CASCADE, related_name='hospital_service_requests')
    customer = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='customer_service_requests'
    )
    admin = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='forwarded_service_requests'
    )
    ambulance_request = models.ForeignKey(
        AmbulanceRequest, null=True, blank=True, on_delete=models.SET_NULL, related_name='service_requests'
    )
    service_type = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    priority = models.CharField(max_length=10, default='normal')
    hospital_response = models.CharField(max_length=20, blank=True, null=True)
    hospital_response_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'hospital_service_requests'
        indexes = [
            models.Index(fields=['hospital', 'created_at'], name='hsr_hospital_created_idx'),
        ]

    def __str__(self) -> str:
        return f"Service request #{self.pk} -> {self.hospital_id} ({self.status})"


class Appointment(models.Model):
    customer = models.ForeignKey(User, on_delete=models.CASCADE, related_name='appointments')
    doctor = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctor_appointments'
    )
    appointment_date = models.DateField(null=True, blank=True)
    appointment_time = models.CharField(max_length=20, blank=True)
    reason = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, default='pending', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'appointments'

    def __str__(self) -> str:
        return f"Appointment #{self.pk} ({self.status})"


class PendingRegistration(models.Model):
    """A doctor or staff sign-up waiting for admin approval."""
    ROLE_CHOICES = [
        ('doctor', 'Doctor'),
        ('staff', 'Staff'),
    ]
    full_name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=20, blank=True, null=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES)
    specialization = models.CharField(max_length=255, blank=True, null=True)
    status = models.CharField(max_length=20, default='pending', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'pending_registrations'

    def __str__(self) -> str:
        return f"{self.full_name} ({self.role}, {self.status})"


class FeedbackComplaint(models.Model):
    TYPE_CHOICES = [
        ('feedback', 'Feedback'),
        ('complaint', 'Complaint'),
    ]
    customer = models.ForeignKey(User, on_delete=models.CASCADE, related_name='feedback_complaints')
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='feedback')
    subject = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True)
    priority = models.CharField(max_length=10, default='normal')
    status = models.CharField(max_length=20, default='pending')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'feedback_complaints'

    def __str__(self) -> str:
        return f"{self.type}: {self.subject}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
