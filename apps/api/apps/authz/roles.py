"""
Role and permission queries.

Always evaluated against the database so role changes apply to the very
next request; nothing is cached on the user object.
"""
from typing import Iterable

from django.db.models import Q

from apps.authz.models import Permission, RoleChoices, UserRole


def user_role_slugs(user) -> set:
    if user is None or not user.is_authenticated:
        return set()
    return set(
        UserRole.objects.filter(user_id=user.id).values_list('role__slug', flat=True)
    )


def has_role(user, slug: str) -> bool:
    if user is None or not user.is_authenticated:
        return False
    return UserRole.objects.filter(user_id=user.id, role__slug=slug).exists()


def has_any_role(user, slugs: Iterable[str]) -> bool:
    if user is None or not user.is_authenticated:
        return False
    return UserRole.objects.filter(user_id=user.id, role__slug__in=list(slugs)).exists()


def has_permission(user, slug: str) -> bool:
    """True if the permission is granted directly or through one of the user's roles."""
    if user is None or not user.is_authenticated:
        return False
    return Permission.objects.filter(
        Q(user_grants__user_id=user.id) | Q(roles__user_roles__user_id=user.id),
        slug=slug,
    ).exists()


def is_administrator(user) -> bool:
    return has_role(user, RoleChoices.ADMINISTRATOR)
