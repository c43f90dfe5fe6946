"""
Scheduling models: timetable_slot, consultation
"""
import uuid
from django.conf import settings
from django.db import models


class TimetableSlot(models.Model):
    """
    A doctor's bookable time at a clinic.

    At most one slot per (doctor, datetime). ``scheduled`` is true exactly
    while a consultation occupies the slot; it is only flipped inside the
    transaction that creates, moves or removes that consultation.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    doctor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='timetable_slots'
    )
    clinic = models.ForeignKey(
        'core.Clinic',
        on_delete=models.CASCADE,
        related_name='timetable_slots'
    )
    datetime = models.DateTimeField()
    scheduled = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'timetable_slot'
        verbose_name = 'Timetable Slot'
        verbose_name_plural = 'Timetable Slots'
        ordering = ['datetime']
        constraints = [
            models.UniqueConstraint(fields=['doctor', 'datetime'], name='uniq_slot_doctor_datetime'),
        ]
        indexes = [
            models.Index(fields=['clinic', 'scheduled', 'datetime'], name='idx_slot_clinic_free'),
        ]

    def __str__(self):
        return f"{self.doctor_id} @ {self.datetime.isoformat()}"


class Consultation(models.Model):
    """
    A booked appointment occupying the doctor's slot at the same datetime.

    Lifecycle: booked (confirmed=False) -> confirmed -> removed. Removal
    (user cancel or auto-cancel sweep) deletes the row.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    datetime = models.DateTimeField()
    is_return = models.BooleanField(default=False)
    confirmed = models.BooleanField(default=False)
    clinic = models.ForeignKey(
        'core.Clinic',
        on_delete=models.CASCADE,
        related_name='consultations'
    )
    doctor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='doctor_consultations'
    )
    patient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='patient_consultations'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'consultation'
        verbose_name = 'Consultation'
        verbose_name_plural = 'Consultations'
        ordering = ['datetime']
        constraints = [
            # One live consultation per doctor slot
            models.UniqueConstraint(fields=['doctor', 'datetime'], name='uniq_consultation_doctor_datetime'),
        ]
        indexes = [
            models.Index(fields=['datetime'], name='idx_consultation_datetime'),
            models.Index(fields=['patient', 'datetime'], name='idx_consultation_patient'),
            models.Index(fields=['clinic', 'datetime'], name='idx_consultation_clinic'),
        ]

    def __str__(self):
        return f"Consultation {self.id} @ {self.datetime.isoformat()}"
