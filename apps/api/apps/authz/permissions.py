"""
Route guards by role.

A failing guard answers 403; ownership checks inside handlers answer
401 or 403 depending on the endpoint.
"""
from rest_framework import permissions

from apps.authz.models import RoleChoices
from apps.authz.roles import has_any_role


class HasAnyRole(permissions.BasePermission):
    """Allows authenticated users holding at least one of ``allowed_roles``."""
    allowed_roles = ()
    message = 'Your role does not allow this action'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return has_any_role(request.user, self.allowed_roles)


class IsAdministrator(HasAnyRole):
    allowed_roles = (RoleChoices.ADMINISTRATOR,)


class IsDoctor(HasAnyRole):
    allowed_roles = (RoleChoices.DOCTOR,)


class IsPatient(HasAnyRole):
    allowed_roles = (RoleChoices.PATIENT,)


class IsAssistant(HasAnyRole):
    allowed_roles = (RoleChoices.ASSISTANT,)


class IsPatientOrAssistant(HasAnyRole):
    allowed_roles = (RoleChoices.PATIENT, RoleChoices.ASSISTANT)


class IsDoctorOrAdministrator(HasAnyRole):
    allowed_roles = (RoleChoices.DOCTOR, RoleChoices.ADMINISTRATOR)


class IsPatientOrAdministrator(HasAnyRole):
    allowed_roles = (RoleChoices.PATIENT, RoleChoices.ADMINISTRATOR)


class ReadAnyWriteAdministrator(permissions.BasePermission):
    """
    Catalog guard: any authenticated user reads, administrators write.
    """

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return has_any_role(request.user, (RoleChoices.ADMINISTRATOR,))
