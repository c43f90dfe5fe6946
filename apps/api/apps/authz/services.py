"""
Account services: registration, password reset and role assignment.

Mail side effects are dispatched explicitly after the surrounding
transaction commits.
"""
import logging
import secrets
from datetime import datetime
from typing import Iterable, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.authz.models import (
    Permission,
    Role,
    RoleChoices,
    RolePermission,
    User,
    UserPermission,
    UserRole,
)
from apps.core.exceptions import NotFoundError, UnauthorizedError
from apps.core.observability import log_domain_event
from apps.core.reconcile import reconcile_join_rows

logger = logging.getLogger(__name__)


def register_user(validated_data: dict) -> User:
    """Create a user from sign-up data and give it the patient role."""
    with transaction.atomic():
        password = validated_data.pop('password')
        email = validated_data.pop('email')
        user = User.objects.create_user(email=email, password=password, **validated_data)
        role, _ = Role.objects.get_or_create(
            slug=RoleChoices.PATIENT,
            defaults={'name': RoleChoices.PATIENT.label}
        )
        UserRole.objects.create(user=user, role=role)

    logger.info('User registered', extra={'user_id': str(user.id)})
    return user


def request_password_reset(email: str) -> User:
    """
    Store a fresh reset token on the user and mail it.

    Raises:
        NotFoundError: no user with that email
    """
    from apps.notifications.tasks import dispatch_forgot_password_mail

    with transaction.atomic():
        try:
            user = User.objects.select_for_update().get(email__iexact=email)
        except User.DoesNotExist:
            raise NotFoundError('User not found')

        user.token = secrets.token_hex(10)
        user.token_created_at = timezone.now()
        user.save(update_fields=['token', 'token_created_at', 'updated_at'])

        transaction.on_commit(lambda: dispatch_forgot_password_mail(user.id))

    log_domain_event(
        'password_reset_requested',
        entity_type='User',
        entity_id=str(user.id),
    )
    return user


def reset_password(token: str, password: str, now: Optional[datetime] = None) -> User:
    """
    Set a new password using a reset token.

    Raises:
        NotFoundError: unknown token
        UnauthorizedError: token older than PASSWORD_RESET_TOKEN_TTL_DAYS whole days
    """
    now = now or timezone.now()

    with transaction.atomic():
        try:
            user = User.objects.select_for_update().get(token=token)
        except User.DoesNotExist:
            raise NotFoundError('User not found')

        if (now - user.token_created_at).days > settings.PASSWORD_RESET_TOKEN_TTL_DAYS:
            raise UnauthorizedError('Token expired')

        user.token = None
        user.token_created_at = None
        user.set_password(password)
        user.save(update_fields=['token', 'token_created_at', 'password', 'updated_at'])

    logger.info('Password reset completed', extra={'user_id': str(user.id)})
    return user


def _resolve_ids(model, slugs: Iterable[str], label: str) -> list:
    slugs = set(slugs)
    found = dict(model.objects.filter(slug__in=slugs).values_list('slug', 'id'))
    missing = slugs - set(found)
    if missing:
        raise NotFoundError(f'{label} not found: {", ".join(sorted(missing))}')
    return list(found.values())


def assign_roles(user: User, role_slugs: Iterable[str], permission_slugs: Optional[Iterable[str]] = None):
    """Replace the user's roles (and direct permissions when given)."""
    with transaction.atomic():
        added, removed = reconcile_join_rows(
            UserRole, 'user', user.id, 'role', _resolve_ids(Role, role_slugs, 'Role')
        )
        if permission_slugs is not None:
            reconcile_join_rows(
                UserPermission, 'user', user.id, 'permission',
                _resolve_ids(Permission, permission_slugs, 'Permission')
            )

    logger.info(
        'User roles reconciled',
        extra={'user_id': str(user.id), 'roles_added': len(added), 'roles_removed': len(removed)}
    )
    return user


def set_role_permissions(role: Role, permission_slugs: Iterable[str]) -> Role:
    reconcile_join_rows(
        RolePermission, 'role', role.id, 'permission',
        _resolve_ids(Permission, permission_slugs, 'Permission')
    )
    return role
