"""
Core models: clinic, clinic_address, clinic_specialty
"""
import uuid
from django.conf import settings
from django.db import models


class Clinic(models.Model):
    """
    A clinic owned by a user (usually an administrator).

    Doctors and assistants belong to a clinic through User.clinic;
    timetable slots and consultations always reference one.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=30)
    cnpj = models.CharField(max_length=18, unique=True, help_text='Company registration number')
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='owned_clinics'
    )
    specialties = models.ManyToManyField(
        'catalog.Specialty',
        through='ClinicSpecialty',
        related_name='clinics',
        blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clinic'
        verbose_name = 'Clinic'
        verbose_name_plural = 'Clinics'
        ordering = ['name']
        indexes = [
            models.Index(fields=['owner'], name='idx_clinic_owner'),
        ]

    def __str__(self):
        return self.name


class Address(models.Model):
    """Postal address of a clinic (zero or one per clinic)."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    clinic = models.OneToOneField(
        Clinic,
        on_delete=models.CASCADE,
        related_name='address'
    )
    street = models.CharField(max_length=255)
    number = models.CharField(max_length=20)
    complement = models.CharField(max_length=255, blank=True, default='')
    district = models.CharField(max_length=120)
    city = models.CharField(max_length=120)
    state = models.CharField(max_length=60)
    zipcode = models.CharField(max_length=20)
    country = models.CharField(max_length=60)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clinic_address'
        verbose_name = 'Address'
        verbose_name_plural = 'Addresses'

    def __str__(self):
        return f"{self.street}, {self.number} - {self.city}"


class ClinicSpecialty(models.Model):
    clinic = models.ForeignKey(Clinic, on_delete=models.CASCADE, related_name='clinic_specialties')
    specialty = models.ForeignKey(
        'catalog.Specialty',
        on_delete=models.CASCADE,
        related_name='clinic_specialties'
    )

    class Meta:
        db_table = 'clinic_specialty'
        unique_together = [('clinic', 'specialty')]

    def __str__(self):
        return f"{self.clinic_id} - {self.specialty_id}"
