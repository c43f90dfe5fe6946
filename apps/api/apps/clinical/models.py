"""
Clinical models: diagnostic, prescription, referral, exam_request, exam_result.

Every record hangs off a consultation, directly or through its diagnostic
or exam request, and is written only by that consultation's doctor.
"""
import uuid
from django.db import models


# ============================================================================
# Enums
# ============================================================================

class MedicineFrequencyUnit(models.TextChoices):
    """Unit of a prescription's dosing frequency"""
    WEEK = 'WEEK', 'Week'
    MONTH = 'MONTH', 'Month'
    DAY = 'DAY', 'Day'
    HOUR = 'HOUR', 'Hour'


# ============================================================================
# Diagnostic chain
# ============================================================================

class Diagnostic(models.Model):
    """
    Doctor's finding for a consultation.

    One per consultation. ``operation_date`` is present iff ``surgery`` is.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    consultation = models.OneToOneField(
        'scheduling.Consultation',
        on_delete=models.CASCADE,
        related_name='diagnostic'
    )
    report = models.TextField()
    condition = models.ForeignKey(
        'catalog.Condition',
        on_delete=models.PROTECT,
        related_name='diagnostics'
    )
    surgery = models.ForeignKey(
        'catalog.Surgery',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='diagnostics'
    )
    operation_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'diagnostic'
        verbose_name = 'Diagnostic'
        verbose_name_plural = 'Diagnostics'

    def __str__(self):
        return f"Diagnostic {self.id} ({self.consultation_id})"


class Prescription(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    diagnostic = models.ForeignKey(
        Diagnostic,
        on_delete=models.CASCADE,
        related_name='prescriptions'
    )
    medicine = models.ForeignKey(
        'catalog.Medicine',
        on_delete=models.PROTECT,
        related_name='prescriptions'
    )
    issued_on = models.DateTimeField(auto_now_add=True)
    expires_on = models.DateTimeField()
    medicine_amount = models.PositiveIntegerField()
    medicine_frequency = models.PositiveIntegerField()
    medicine_frequency_unit = models.CharField(
        max_length=10,
        choices=MedicineFrequencyUnit.choices
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'prescription'
        verbose_name = 'Prescription'
        verbose_name_plural = 'Prescriptions'
        ordering = ['issued_on']
        indexes = [
            models.Index(fields=['diagnostic'], name='idx_prescription_diagnostic'),
        ]

    def __str__(self):
        return f"Prescription {self.id}"


class Referral(models.Model):
    """Referral of the patient to another specialty; ``date`` follows every write."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    consultation = models.ForeignKey(
        'scheduling.Consultation',
        on_delete=models.CASCADE,
        related_name='referrals'
    )
    specialty = models.ForeignKey(
        'catalog.Specialty',
        on_delete=models.PROTECT,
        related_name='referrals'
    )
    date = models.DateTimeField()

    class Meta:
        db_table = 'referral'
        verbose_name = 'Referral'
        verbose_name_plural = 'Referrals'
        ordering = ['-date']

    def __str__(self):
        return f"Referral {self.id}"


# ============================================================================
# Exams
# ============================================================================

class ExamRequest(models.Model):
    """Exam ordered during a consultation. The set is replaced wholesale on sync."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    consultation = models.ForeignKey(
        'scheduling.Consultation',
        on_delete=models.CASCADE,
        related_name='exam_requests'
    )
    exam = models.ForeignKey(
        'catalog.Exam',
        on_delete=models.PROTECT,
        related_name='exam_requests'
    )
    date = models.DateTimeField()

    class Meta:
        db_table = 'exam_request'
        verbose_name = 'Exam Request'
        verbose_name_plural = 'Exam Requests'
        unique_together = [('consultation', 'exam')]
        indexes = [
            models.Index(fields=['consultation'], name='idx_exam_request_consult'),
        ]

    def __str__(self):
        return f"{self.exam_id} for {self.consultation_id}"


class ExamResult(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    exam_request = models.ForeignKey(
        ExamRequest,
        on_delete=models.PROTECT,
        related_name='results'
    )
    short_report = models.TextField()
    date = models.DateTimeField()
    report = models.ForeignKey(
        'documents.File',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'exam_result'
        verbose_name = 'Exam Result'
        verbose_name_plural = 'Exam Results'
        ordering = ['-date']

    def __str__(self):
        return f"ExamResult {self.id}"
