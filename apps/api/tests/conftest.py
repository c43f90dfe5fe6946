"""
Global test fixtures for pytest.

Provides reusable fixtures for API testing:
- Users by role and an authenticated client factory
- Clinic, catalog, slot and consultation instances
- A patched blob store so no test talks to MinIO
"""
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.authz.models import Role, RoleChoices, User, UserRole
from apps.catalog.models import Condition, Exam, Medicine, Specialty, Surgery
from apps.core.models import Address, Clinic
from apps.scheduling.models import Consultation, TimetableSlot


def create_user_with_role(email, role_slug, **extra):
    """Helper function to create user with role"""
    extra.setdefault('first_name', email.split('@')[0].title())
    extra.setdefault('last_name', 'Test')
    user = User.objects.create_user(email=email, password='test123', **extra)
    role, _ = Role.objects.get_or_create(
        slug=role_slug,
        defaults={'name': RoleChoices(role_slug).label}
    )
    UserRole.objects.create(user=user, role=role)
    return user


def future(days, hour=10):
    """Whole-hour datetime ``days`` days from now."""
    return (timezone.now() + timedelta(days=days)).replace(hour=hour, minute=0, second=0, microsecond=0)


# ============================================================================
# API Clients
# ============================================================================

@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


@pytest.fixture
def client_for():
    """Factory returning an API client authenticated as ``user``."""
    def _client_for(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client_for


# ============================================================================
# Users
# ============================================================================

@pytest.fixture
def administrator(db):
    return create_user_with_role('admin@test.com', RoleChoices.ADMINISTRATOR)


@pytest.fixture
def other_administrator(db):
    return create_user_with_role('other.admin@test.com', RoleChoices.ADMINISTRATOR)


@pytest.fixture
def specialty(db):
    return Specialty.objects.create(name='Cardiology', description='Heart')


@pytest.fixture
def other_specialty(db):
    return Specialty.objects.create(name='Dermatology', description='Skin')


@pytest.fixture
def clinic(db, administrator):
    clinic = Clinic.objects.create(
        name='Heart Care',
        phone='+55 11 4000-0000',
        cnpj='11.222.333/0001-44',
        owner=administrator,
    )
    Address.objects.create(
        clinic=clinic,
        street='Rua A',
        number='100',
        district='Centro',
        city='Sao Paulo',
        state='SP',
        zipcode='01000-000',
        country='Brazil',
    )
    return clinic


@pytest.fixture
def other_clinic(db, administrator):
    return Clinic.objects.create(
        name='Skin Care',
        phone='+55 11 5000-0000',
        cnpj='55.666.777/0001-88',
        owner=administrator,
    )


@pytest.fixture
def doctor(db, clinic, specialty):
    return create_user_with_role('doctor@test.com', RoleChoices.DOCTOR, clinic=clinic, specialty=specialty)


@pytest.fixture
def other_doctor(db, clinic, specialty):
    return create_user_with_role('other.doctor@test.com', RoleChoices.DOCTOR, clinic=clinic, specialty=specialty)


@pytest.fixture
def patient(db):
    return create_user_with_role('patient@test.com', RoleChoices.PATIENT)


@pytest.fixture
def other_patient(db):
    return create_user_with_role('other.patient@test.com', RoleChoices.PATIENT)


@pytest.fixture
def assistant(db, clinic):
    return create_user_with_role('assistant@test.com', RoleChoices.ASSISTANT, clinic=clinic)


@pytest.fixture
def other_assistant(db, other_clinic):
    return create_user_with_role('other.assistant@test.com', RoleChoices.ASSISTANT, clinic=other_clinic)


# ============================================================================
# Scheduling
# ============================================================================

@pytest.fixture
def slot(db, doctor, clinic):
    """Free slot ten days ahead."""
    return TimetableSlot.objects.create(doctor=doctor, clinic=clinic, datetime=future(10))


@pytest.fixture
def consultation(db, slot, patient):
    """Consultation occupying ``slot``."""
    slot.scheduled = True
    slot.save()
    return Consultation.objects.create(
        clinic=slot.clinic,
        doctor=slot.doctor,
        patient=patient,
        datetime=slot.datetime,
        is_return=False,
    )


@pytest.fixture
def book(db):
    """Factory: slot plus consultation at ``when``, the way a booking leaves them."""
    def _book(doctor, clinic, patient, when, confirmed=False):
        TimetableSlot.objects.create(doctor=doctor, clinic=clinic, datetime=when, scheduled=True)
        return Consultation.objects.create(
            clinic=clinic,
            doctor=doctor,
            patient=patient,
            datetime=when,
            is_return=False,
            confirmed=confirmed,
        )
    return _book


@pytest.fixture
def in_days():
    """Whole-hour datetime factory, ``in_days(3)`` is three days from now."""
    return future


# ============================================================================
# Catalog
# ============================================================================

@pytest.fixture
def condition(db, specialty):
    return Condition.objects.create(name='Arrhythmia', specialty=specialty)


@pytest.fixture
def surgery(db, specialty):
    return Surgery.objects.create(name='Ablation', specialty=specialty)


@pytest.fixture
def medicine(db):
    return Medicine.objects.create(name='Amiodarone', active_ingredient='amiodarone hydrochloride')


@pytest.fixture
def exams(db):
    return [
        Exam.objects.create(name='Electrocardiogram'),
        Exam.objects.create(name='Holter'),
        Exam.objects.create(name='Echocardiogram'),
    ]


# ============================================================================
# Storage
# ============================================================================

@pytest.fixture
def mock_storage():
    """Patch the MinIO-backed storage functions."""
    with patch('apps.documents.storage.store') as store, \
            patch('apps.documents.storage.read') as read, \
            patch('apps.documents.storage.delete') as delete:
        store.side_effect = lambda data, key, content_type='application/octet-stream': key
        yield {'store': store, 'read': read, 'delete': delete}
