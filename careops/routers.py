"""
URL mappings for the HealthDesk API.

Paths carry no trailing slash to match the web client.  User ids in the
admin routes are captured as strings; the service layer rejects
non-numeric ids with a 400.
"""
from django.urls import include, path

from .auth_views import jwt_refresh_view, login_view
from .views import ambulance, health, hospital, notifications, users

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz),

    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),

    # admin user management
    path('api/admin/users', users.list_users, name='admin_users'),
    path('api/admin/users/role/<str:role>', users.list_users_by_role, name='admin_users_by_role'),
    path('api/admin/users/<str:user_id>/suspend', users.suspend_user, name='admin_user_suspend'),
    path('api/admin/users/<str:user_id>/reactivate', users.reactivate_user, name='admin_user_reactivate'),
    path('api/admin/users/<str:user_id>/reset-password', users.reset_password, name='admin_user_reset_password'),
    path('api/admin/users/<str:user_id>', users.delete_user, name='admin_user_delete'),
    path('api/admin/doctors', users.add_doctor, name='admin_add_doctor'),
    path('api/admin/create-admin', users.create_admin, name='admin_create_admin'),

    # ambulance dispatch
    path('api/ambulance', ambulance.ambulance_requests, name='ambulance_requests'),
    path('api/ambulance/customer', ambulance.customer_ambulance_requests, name='ambulance_customer'),
    path('api/ambulance/hospitals', ambulance.available_hospitals, name='ambulance_hospitals'),
    path('api/ambulance/forward-to-hospital', ambulance.forward_to_hospital, name='ambulance_forward'),
    path('api/ambulance/<int:request_id>', ambulance.update_ambulance_request, name='ambulance_update'),
    path('api/ambulance/<int:request_id>/assign', ambulance.assign_ambulance_request, name='ambulance_assign'),
    path('api/ambulance/<int:request_id>/status', ambulance.update_ambulance_status, name='ambulance_status'),
    path('api/ambulance/<int:request_id>/read', ambulance.mark_ambulance_read, name='ambulance_read'),

    # hospital service requests
    path('api/hospital/service-requests', hospital.service_requests, name='hospital_service_requests'),
    path('api/hospital/service-requests/<int:service_request_id>/accept',
         hospital.accept_service_request, name='hospital_service_request_accept'),
    path('api/hospital/service-requests/<int:service_request_id>/reject',
         hospital.reject_service_request, name='hospital_service_request_reject'),

    # notifications
    path('api/notifications', notifications.notifications, name='notifications'),
    path('api/notifications/customer', notifications.customer_notifications, name='notifications_customer'),
    path('api/notifications/read-all', notifications.mark_all_notifications_read, name='notifications_read_all'),
    path('api/notifications/<str:notification_id>/read', notifications.mark_notification_read,
         name='notification_read'),
]
