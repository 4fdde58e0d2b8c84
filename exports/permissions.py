"""
Role capability table and the DRF permission that gates the export API.
"""
from rest_framework.permissions import BasePermission

ROLE_POLICIES = {
    "admin": {
        "patients": {"read", "delete"},
        "appointments": {"read", "create", "update", "delete"},
        "billing": {"read", "create", "update", "delete"},
        "payments": {"read", "create", "update", "delete"},
        "exports": {"read", "create", "delete"},
    },
    "receptionist": {
        "patients": {"read", "create", "update", "delete"},
        "appointments": {"read", "create", "update"},
        "payments": {"read"},
        # register, dashboard and daily reports
        "exports": {"read", "create"},
    },
    "cashier": {
        "billing": {"read", "create", "update"},
        "payments": {"read", "create", "update"},
        "exports": {"read", "create"},
    },
    "dentist": {
        "patients": {"read"},
        "appointments": {"read", "update"},
        "exports": {"create"},
    },
    "doctor": {
        "patients": {"read"},
        "appointments": {"read", "update"},
    },
    "nurse": {
        "patients": {"read", "update"},
        "appointments": {"read", "update"},
    },
    "lab_tech": {"patients": {"read"}},
    "radiologist": {"patients": {"read"}},
    "pharmacist": {"patients": {"read"}},
}


def can(role, resource: str, action: str) -> bool:
    """True if ``role`` may perform ``action`` on ``resource``; unknown roles get nothing."""
    policies = ROLE_POLICIES.get(role or "")
    if not policies:
        return False
    return action in policies.get(resource, ())


class CanExport(BasePermission):
    """Allow users whose role may create exports."""
    message = "Your role is not allowed to export data."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and can(getattr(user, "role", None), "exports", "create"))


class CanListExports(BasePermission):
    """Allow users whose role may see which datasets exist."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        role = getattr(user, "role", None)
        return can(role, "exports", "read") or can(role, "exports", "create")
