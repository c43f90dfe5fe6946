"""
Clinic services: clinic, address and specialty set are written together.
"""
import logging
from typing import Optional

from django.db import transaction

from apps.catalog.models import Specialty
from apps.core.exceptions import NotFoundError
from apps.core.models import Address, Clinic, ClinicSpecialty
from apps.core.reconcile import reconcile_join_rows

logger = logging.getLogger(__name__)


def _check_specialties(specialty_ids):
    found = set(Specialty.objects.filter(id__in=specialty_ids).values_list('id', flat=True))
    if len(found) != len(set(specialty_ids)):
        raise NotFoundError('Specialty not found')


def _write_nested(clinic: Clinic, address: Optional[dict], specialties: Optional[list]):
    if address is not None:
        Address.objects.update_or_create(clinic=clinic, defaults=address)
    if specialties is not None:
        _check_specialties(specialties)
        reconcile_join_rows(ClinicSpecialty, 'clinic', clinic.id, 'specialty', specialties)


def create_clinic(owner, data: dict) -> Clinic:
    address = data.pop('address', None)
    specialties = data.pop('specialties', None)

    with transaction.atomic():
        clinic = Clinic.objects.create(owner=owner, **data)
        _write_nested(clinic, address, specialties)

    logger.info('Clinic created', extra={'clinic_id': str(clinic.id), 'owner_id': str(owner.id)})
    return clinic


def update_clinic(clinic: Clinic, data: dict) -> Clinic:
    address = data.pop('address', None)
    specialties = data.pop('specialties', None)

    with transaction.atomic():
        for field, value in data.items():
            setattr(clinic, field, value)
        clinic.save()
        _write_nested(clinic, address, specialties)

    logger.info('Clinic updated', extra={'clinic_id': str(clinic.id)})
    return clinic
