"""
Django admin registrations for the careops models.

Lets superusers inspect accounts, dispatch records and the audit trail
under ``/admin/``.
"""

from django.contrib import admin

from .models import (
    AdminMetadata,
    AmbulanceRequest,
    Appointment,
    AuditEvent,
    CustomerProfile,
    DoctorProfile,
    FeedbackComplaint,
    HospitalProfile,
    HospitalServiceRequest,
    PendingRegistration,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'full_name', 'role', 'status', 'is_active')
    list_filter = ('role', 'status')
    search_fields = ('username', 'email', 'full_name', 'phone')


@admin.register(AdminMetadata)
class AdminMetadataAdmin(admin.ModelAdmin):
    list_display = ('user', 'state', 'district', 'created_by', 'created_at')
    list_filter = ('state',)


@admin.register(HospitalProfile)
class HospitalProfileAdmin(admin.ModelAdmin):
    list_display = ('hospital_name', 'user', 'state', 'district', 'number_of_ambulances')
    list_filter = ('state', 'hospital_type')
    search_fields = ('hospital_name', 'district')


@admin.register(CustomerProfile)
class CustomerProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'address')


@admin.register(DoctorProfile)
class DoctorProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'specialization', 'experience_years', 'consultation_fee')
    search_fields = ('specialization',)


@admin.register(AmbulanceRequest)
class AmbulanceRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer', 'emergency_type', 'priority', 'status', 'assigned_staff', 'created_at')
    list_filter = ('status', 'priority')
    search_fields = ('emergency_type', 'pickup_address')


@admin.register(HospitalServiceRequest)
class HospitalServiceRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'hospital', 'ambulance_request', 'status', 'priority', 'created_at')
    list_filter = ('status',)


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer', 'doctor', 'appointment_date', 'appointment_time', 'status')
    list_filter = ('status',)


@admin.register(PendingRegistration)
class PendingRegistrationAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'email', 'role', 'status', 'created_at')
    list_filter = ('role', 'status')


@admin.register(FeedbackComplaint)
class FeedbackComplaintAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer', 'type', 'subject', 'priority', 'status')
    list_filter = ('type', 'status')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
