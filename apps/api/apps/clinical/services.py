"""
Clinical record services.

Each mutation resolves the owning consultation first (directly, or through
the diagnostic or exam request) and requires the requester to be that
consultation's doctor; anyone else gets a 401 and nothing is written.
"""
import logging
from datetime import datetime
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.catalog.models import Condition, Exam, Medicine, Specialty, Surgery
from apps.clinical.models import (
    Diagnostic,
    ExamRequest,
    ExamResult,
    MedicineFrequencyUnit,
    Prescription,
    Referral,
)
from apps.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from apps.core.observability import log_domain_event
from apps.core.reconcile import reconcile_join_rows
from apps.documents.models import File
from apps.documents.services import delete_file
from apps.scheduling.models import Consultation
from apps.scheduling.services import parse_uuid

logger = logging.getLogger(__name__)


# ============================================================================
# Guards and lookups
# ============================================================================

def require_doctor(requester, consultation: Consultation):
    if consultation.doctor_id != requester.id:
        raise UnauthorizedError('Only the consultation doctor can do this')


def require_participant(requester, consultation: Consultation):
    if requester.id not in (consultation.doctor_id, consultation.patient_id):
        raise UnauthorizedError('Not authorized to access this record')


def _get(model, pk, label: str, queryset=None):
    queryset = queryset if queryset is not None else model.objects.all()
    try:
        return queryset.get(pk=pk)
    except (model.DoesNotExist, ValueError, ValidationError):
        raise NotFoundError(f'{label} not found')


def get_consultation(consultation_id) -> Consultation:
    return _get(Consultation, consultation_id, 'Consultation')


# ============================================================================
# Diagnostic
# ============================================================================

def create_diagnostic(
    requester,
    consultation_id,
    report: str,
    condition_id,
    surgery_id=None,
    operation_date: Optional[datetime] = None,
) -> Diagnostic:
    """
    Record the diagnostic of a consultation.

    Raises:
        NotFoundError: consultation, condition or surgery missing
        UnauthorizedError: requester is not the consultation's doctor
        BadRequestError: diagnostic already exists, surgery without operation date
    """
    with transaction.atomic():
        consultation = _get(
            Consultation, consultation_id, 'Consultation',
            Consultation.objects.select_for_update()
        )
        require_doctor(requester, consultation)

        if Diagnostic.objects.filter(consultation=consultation).exists():
            raise BadRequestError('Diagnostic already exists')

        condition = _get(Condition, condition_id, 'Condition')
        surgery = None
        if surgery_id:
            surgery = _get(Surgery, surgery_id, 'Surgery')
            if not operation_date:
                raise BadRequestError('Operation date required')
        elif operation_date:
            raise BadRequestError('Surgery id required')

        diagnostic = Diagnostic.objects.create(
            consultation=consultation,
            report=report,
            condition=condition,
            surgery=surgery,
            operation_date=operation_date,
        )

    log_domain_event(
        'diagnostic_created',
        entity_type='Diagnostic',
        entity_id=str(diagnostic.id),
        entity_ids={'consultation_id': str(consultation.id), 'doctor_id': str(requester.id)},
        with_surgery=surgery is not None,
    )
    return diagnostic


def get_diagnostic(requester, diagnostic_id) -> Diagnostic:
    diagnostic = _get(
        Diagnostic, diagnostic_id, 'Diagnostic',
        Diagnostic.objects.select_related('consultation', 'condition', 'surgery')
    )
    require_participant(requester, diagnostic.consultation)
    return diagnostic


# ============================================================================
# Prescription
# ============================================================================

def _validate_prescription(data: dict, now: datetime) -> dict:
    """Check order: medicine, expiry, quantities, frequency unit."""
    values = {}
    if 'medicine_id' in data:
        values['medicine'] = _get(Medicine, data['medicine_id'], 'Medicine')
    if 'expires_on' in data:
        if data['expires_on'] < now:
            raise BadRequestError('Expiration date is in the past')
        values['expires_on'] = data['expires_on']
    for field in ('medicine_amount', 'medicine_frequency'):
        if field in data:
            if data[field] <= 0:
                raise BadRequestError(f'{field} must be greater than zero')
            values[field] = data[field]
    if 'medicine_frequency_unit' in data:
        if data['medicine_frequency_unit'] not in MedicineFrequencyUnit.values:
            raise BadRequestError('Invalid medicine frequency unit')
        values['medicine_frequency_unit'] = data['medicine_frequency_unit']
    return values


def _diagnostic_for_write(requester, diagnostic_id) -> Diagnostic:
    diagnostic = _get(
        Diagnostic, diagnostic_id, 'Diagnostic',
        Diagnostic.objects.select_related('consultation')
    )
    require_doctor(requester, diagnostic.consultation)
    return diagnostic


def create_prescription(requester, data: dict, now: Optional[datetime] = None) -> Prescription:
    now = now or timezone.now()
    diagnostic = _diagnostic_for_write(requester, data.get('diagnostic_id'))
    values = _validate_prescription(data, now)

    prescription = Prescription.objects.create(diagnostic=diagnostic, **values)
    logger.info(
        'Prescription created',
        extra={'prescription_id': str(prescription.id), 'diagnostic_id': str(diagnostic.id)}
    )
    return prescription


def _prescription_for_write(requester, prescription_id) -> Prescription:
    prescription = _get(
        Prescription, prescription_id, 'Prescription',
        Prescription.objects.select_related('diagnostic__consultation')
    )
    require_doctor(requester, prescription.diagnostic.consultation)
    return prescription


def update_prescription(requester, prescription_id, data: dict, now: Optional[datetime] = None) -> Prescription:
    now = now or timezone.now()
    with transaction.atomic():
        prescription = _prescription_for_write(requester, prescription_id)
        for field, value in _validate_prescription(data, now).items():
            setattr(prescription, field, value)
        prescription.save()

    logger.info('Prescription updated', extra={'prescription_id': str(prescription.id)})
    return prescription


def delete_prescription(requester, prescription_id) -> None:
    prescription = _prescription_for_write(requester, prescription_id)
    prescription.delete()
    logger.info('Prescription deleted', extra={'prescription_id': str(prescription_id)})


def get_prescription(requester, prescription_id) -> Prescription:
    prescription = _get(
        Prescription, prescription_id, 'Prescription',
        Prescription.objects.select_related('diagnostic__consultation', 'medicine')
    )
    require_participant(requester, prescription.diagnostic.consultation)
    return prescription


def list_prescriptions(requester, diagnostic_id):
    if not diagnostic_id:
        raise BadRequestError('Diagnostic id required')
    diagnostic = _get(
        Diagnostic, parse_uuid(diagnostic_id, 'diagnostic id'), 'Diagnostic',
        Diagnostic.objects.select_related('consultation')
    )
    require_participant(requester, diagnostic.consultation)
    return diagnostic.prescriptions.select_related('medicine').order_by('issued_on')


# ============================================================================
# Referral
# ============================================================================

def create_referral(requester, consultation_id, specialty_id, now: Optional[datetime] = None) -> Referral:
    consultation = get_consultation(consultation_id)
    require_doctor(requester, consultation)
    specialty = _get(Specialty, specialty_id, 'Specialty')

    referral = Referral.objects.create(
        consultation=consultation,
        specialty=specialty,
        date=now or timezone.now(),
    )
    logger.info(
        'Referral created',
        extra={'referral_id': str(referral.id), 'consultation_id': str(consultation.id)}
    )
    return referral


def update_referral(requester, referral_id, data: dict, now: Optional[datetime] = None) -> Referral:
    referral = _get(Referral, referral_id, 'Referral', Referral.objects.select_related('consultation'))
    require_doctor(requester, referral.consultation)

    if data.get('consultation_id') and data['consultation_id'] != referral.consultation_id:
        consultation = get_consultation(data['consultation_id'])
        require_doctor(requester, consultation)
        referral.consultation = consultation
    if data.get('specialty_id'):
        referral.specialty = _get(Specialty, data['specialty_id'], 'Specialty')

    referral.date = now or timezone.now()
    referral.save()
    logger.info('Referral updated', extra={'referral_id': str(referral.id)})
    return referral


# ============================================================================
# Exam requests and results
# ============================================================================

def sync_exam_requests(requester, consultation_id, exams, now: Optional[datetime] = None):
    """
    Replace the consultation's requested exams with ``exams``.

    New and retained rows get the current date. An exam whose request
    already has results cannot be dropped.
    """
    consultation = get_consultation(consultation_id)
    require_doctor(requester, consultation)

    if exams is None or not isinstance(exams, list):
        raise BadRequestError('Exams required')

    exam_ids = {parse_uuid(exam_id, 'exam id') for exam_id in exams}
    if Exam.objects.filter(id__in=exam_ids).count() != len(exam_ids):
        raise NotFoundError('Exam not found')

    with transaction.atomic():
        if ExamResult.objects.filter(exam_request__consultation=consultation).exclude(
            exam_request__exam_id__in=exam_ids
        ).exists():
            raise BadRequestError('Exam request has results')

        added, removed = reconcile_join_rows(
            ExamRequest, 'consultation', consultation.id, 'exam', exam_ids,
            defaults={'date': now or timezone.now()},
            refresh_kept=True,
        )

    log_domain_event(
        'exam_requests_synced',
        entity_type='Consultation',
        entity_id=str(consultation.id),
        added_count=len(added),
        removed_count=len(removed),
    )
    return consultation.exam_requests.select_related('exam').order_by('exam__name')


def _exam_request_for_write(requester, exam_request_id) -> ExamRequest:
    exam_request = _get(
        ExamRequest, exam_request_id, 'Exam request',
        ExamRequest.objects.select_related('consultation')
    )
    require_doctor(requester, exam_request.consultation)
    return exam_request


def _exam_result_for_write(requester, exam_result_id) -> ExamResult:
    exam_result = _get(
        ExamResult, exam_result_id, 'Exam result',
        ExamResult.objects.select_related('exam_request__consultation', 'report')
    )
    require_doctor(requester, exam_result.exam_request.consultation)
    return exam_result


def create_exam_result(requester, data: dict) -> ExamResult:
    exam_request = _exam_request_for_write(requester, data.get('exam_request_id'))
    report = _get(File, data['report_id'], 'Report') if data.get('report_id') else None

    exam_result = ExamResult.objects.create(
        exam_request=exam_request,
        short_report=data['short_report'],
        date=data['date'],
        report=report,
    )
    logger.info(
        'Exam result created',
        extra={'exam_result_id': str(exam_result.id), 'exam_request_id': str(exam_request.id)}
    )
    return exam_result


def update_exam_result(requester, exam_result_id, data: dict) -> ExamResult:
    """Update an exam result; a replaced report file is deleted."""
    with transaction.atomic():
        exam_result = _exam_result_for_write(requester, exam_result_id)

        if data.get('exam_request_id') and data['exam_request_id'] != exam_result.exam_request_id:
            exam_result.exam_request = _exam_request_for_write(requester, data['exam_request_id'])

        previous_report = None
        if data.get('report_id') and data['report_id'] != exam_result.report_id:
            previous_report = exam_result.report
            exam_result.report = _get(File, data['report_id'], 'Report')

        for field in ('short_report', 'date'):
            if field in data:
                setattr(exam_result, field, data[field])
        exam_result.save()

        if previous_report is not None:
            delete_file(previous_report)

    logger.info('Exam result updated', extra={'exam_result_id': str(exam_result.id)})
    return exam_result


def delete_exam_result(requester, exam_result_id) -> None:
    """Delete an exam result together with its report file and stored bytes."""
    with transaction.atomic():
        exam_result = _exam_result_for_write(requester, exam_result_id)
        report = exam_result.report
        exam_result.delete()
        if report is not None:
            delete_file(report)

    logger.info('Exam result deleted', extra={'exam_result_id': str(exam_result_id)})


def discard_exam_results(consultation_id) -> int:
    """
    Delete every exam result of a consultation that is being removed,
    together with the report files. Runs inside the caller's transaction.
    """
    results = list(
        ExamResult.objects.select_related('report')
        .filter(exam_request__consultation_id=consultation_id)
    )
    for exam_result in results:
        report = exam_result.report
        exam_result.delete()
        if report is not None:
            delete_file(report)

    if results:
        logger.info(
            'Exam results discarded',
            extra={'consultation_id': str(consultation_id), 'exam_result_count': len(results)}
        )
    return len(results)
