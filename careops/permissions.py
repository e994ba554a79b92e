"""
Role based permission classes.

Each class gates a view on the authenticated user's ``role``.  The
``message`` attribute becomes the ``error`` text of the 403 response.
"""
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission


def _has_role(request, *roles: str) -> bool:
    user = getattr(request, "user", None)
    return bool(user and user.is_authenticated and getattr(user, "role", None) in roles)


class IsAdminRole(BasePermission):
    """Allow access only to administrators."""
    message = "Unauthorized. Admin access required."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, "admin")


class IsStaffOrAdmin(BasePermission):
    """Staff and admin share the dispatch desk."""
    message = "Only staff and admin can access ambulance requests"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, "staff", "admin")


class IsNotificationReader(IsStaffOrAdmin):
    message = "Only admin and staff can view notifications"


class IsStaffRole(BasePermission):
    message = "Only staff can assign ambulance requests to themselves"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, "staff")


class IsCustomerRole(BasePermission):
    """Allow access only to customers."""
    message = "Only customers can access this resource"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, "customer")


class IsHospitalRole(BasePermission):
    """Allow access only to hospital accounts."""
    message = "Only hospitals can access service requests"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _has_role(request, "hospital")


def require(request, permission_class) -> None:
    """Apply a role permission inside a view serving several roles."""
    perm = permission_class()
    if not perm.has_permission(request, None):
        raise PermissionDenied(perm.message)
