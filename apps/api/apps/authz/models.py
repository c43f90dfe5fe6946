"""
Authz models: auth_user, auth_role, auth_permission_slug and their joins
"""
import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin


# ============================================================================
# User Management
# ============================================================================

class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        email = self.normalize_email(email)
        extra_fields.setdefault('username', email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Every person using the API: administrators, doctors, assistants and patients.

    - clinic: clinic a doctor or assistant works at
    - specialty: a doctor's specialty
    - avatar: File with the profile picture
    - token/token_created_at: pending password reset
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    username = models.CharField(max_length=150, unique=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    birthdate = models.DateField(null=True, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    clinic = models.ForeignKey(
        'core.Clinic',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='staff'
    )
    specialty = models.ForeignKey(
        'catalog.Specialty',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='doctors'
    )
    avatar = models.ForeignKey(
        'documents.File',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    token = models.CharField(max_length=64, null=True, blank=True, unique=True)
    token_created_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)  # Required for admin access
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'auth_user'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['email'], name='idx_user_email'),
            models.Index(fields=['clinic'], name='idx_user_clinic'),
            models.Index(fields=['specialty'], name='idx_user_specialty'),
        ]

    def __str__(self):
        return self.email

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


# ============================================================================
# Roles and permissions
# ============================================================================

class RoleChoices(models.TextChoices):
    """Fixed role slugs."""
    ADMINISTRATOR = 'administrator', 'Administrator'
    DOCTOR = 'doctor', 'Doctor'
    PATIENT = 'patient', 'Patient'
    ASSISTANT = 'assistant', 'Assistant'


class Role(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slug = models.CharField(max_length=50, unique=True, choices=RoleChoices.choices)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, default='')
    permissions = models.ManyToManyField(
        'Permission',
        through='RolePermission',
        related_name='roles',
        blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'auth_role'
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'
        ordering = ['slug']

    def __str__(self):
        return self.name or self.slug


class Permission(models.Model):
    """
    Named capability (e.g. 'consultations.cancel').

    Attached to roles or granted to users directly.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slug = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'auth_permission_slug'
        verbose_name = 'Permission'
        verbose_name_plural = 'Permissions'
        ordering = ['slug']

    def __str__(self):
        return self.slug


class UserRole(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='user_roles')
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='user_roles')

    class Meta:
        db_table = 'auth_user_role'
        verbose_name = 'User Role'
        verbose_name_plural = 'User Roles'
        unique_together = [('user', 'role')]
        indexes = [
            models.Index(fields=['user'], name='idx_user_role_user'),
            models.Index(fields=['role'], name='idx_user_role_role'),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.role.slug}"


class UserPermission(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='user_permissions_granted')
    permission = models.ForeignKey(Permission, on_delete=models.CASCADE, related_name='user_grants')

    class Meta:
        db_table = 'auth_user_permission_slug'
        unique_together = [('user', 'permission')]


class RolePermission(models.Model):
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='role_permissions')
    permission = models.ForeignKey(Permission, on_delete=models.CASCADE, related_name='role_grants')

    class Meta:
        db_table = 'auth_role_permission_slug'
        unique_together = [('role', 'permission')]
