"""
Custom permission classes for account-type based access control.
"""
from rest_framework.permissions import BasePermission


class IsHospitalAccount(BasePermission):
    """Allow access only to hospital-type accounts."""
    message = 'Access restricted to hospital accounts'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "user_type", None) == "hospital")