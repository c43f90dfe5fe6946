"""
Consultation scheduling services.

Slot store and consultation lifecycle. Every transition that touches a
consultation row also flips the matching TimetableSlot inside the same
transaction, with the slot row locked, so two bookings of one slot can
never both succeed.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Max, Min
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.authz.models import RoleChoices, User
from apps.authz.roles import has_role, is_administrator
from apps.core.exceptions import (
    BadRequestError,
    NotFoundError,
    UnauthorizedError,
    WorkflowError,
)
from apps.core.models import Clinic
from apps.core.observability import metrics
from apps.core.observability.events import log_consultation_event
from apps.scheduling.models import Consultation, TimetableSlot

logger = logging.getLogger(__name__)


# ============================================================================
# Lookups
# ============================================================================

def parse_uuid(value, label: str):
    """Parse an id coming from a query string or path; bad ids are a 400."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise BadRequestError(f'Invalid {label}')


def get_clinic(clinic_id) -> Clinic:
    try:
        return Clinic.objects.get(pk=clinic_id)
    except Clinic.DoesNotExist:
        raise NotFoundError('Clinic not found')


def get_user_with_role(user_id, role: str, label: str) -> User:
    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFoundError(f'{label} not found')
    if not has_role(user, role):
        raise BadRequestError(f'User is not a {role}')
    return user


def _can_manage(requester, consultation: Consultation) -> bool:
    """Patient of the consultation, or an assistant of its clinic."""
    if consultation.patient_id == requester.id:
        return True
    return (
        has_role(requester, RoleChoices.ASSISTANT)
        and requester.clinic_id is not None
        and requester.clinic_id == consultation.clinic_id
    )


def _lock_slot(doctor_id, when) -> Optional[TimetableSlot]:
    return (
        TimetableSlot.objects.select_for_update()
        .filter(doctor_id=doctor_id, datetime=when)
        .first()
    )


def _release_slot(consultation: Consultation) -> int:
    return (
        TimetableSlot.objects.select_for_update()
        .filter(doctor_id=consultation.doctor_id, datetime=consultation.datetime)
        .update(scheduled=False)
    )


def _remove_consultation(consultation: Consultation):
    """Delete the consultation row; exam results go first so their report files are removed too."""
    from apps.clinical.services import discard_exam_results

    discard_exam_results(consultation.pk)
    removed_id = consultation.pk
    consultation.delete()
    # delete() clears the primary key on the instance
    consultation.pk = removed_id


def _notify_schedule(consultation: Consultation):
    from apps.notifications.tasks import dispatch_booking_confirmation

    consultation_id = consultation.id
    transaction.on_commit(lambda: dispatch_booking_confirmation(consultation_id))


# ============================================================================
# Timetable slots
# ============================================================================

def list_slots(requester):
    queryset = TimetableSlot.objects.select_related('clinic', 'doctor').order_by('datetime')
    if is_administrator(requester):
        return queryset
    return queryset.filter(doctor_id=requester.id)


def get_slot(requester, slot_id, for_update: bool = False) -> TimetableSlot:
    queryset = TimetableSlot.objects.select_related('clinic', 'doctor')
    if for_update:
        queryset = queryset.select_for_update()
    try:
        slot = queryset.get(pk=slot_id)
    except TimetableSlot.DoesNotExist:
        raise NotFoundError('Timetable not found')

    if slot.doctor_id != requester.id and not is_administrator(requester):
        raise UnauthorizedError('Not authorized to access this timetable')
    return slot


def create_slot(requester, when: datetime, clinic_id, doctor_id=None) -> TimetableSlot:
    """
    Register a free slot.

    Raises:
        UnauthorizedError: doctor_id names someone else and requester is not an administrator
        BadRequestError: administrator without doctor_id, duplicate datetime, target not a doctor
        NotFoundError: unknown clinic or doctor
    """
    admin = is_administrator(requester)
    if doctor_id and doctor_id != requester.id and not admin:
        raise UnauthorizedError('Not authorized to create timetables for another doctor')
    if not doctor_id and admin:
        raise BadRequestError('Doctor id required')

    doctor_id = doctor_id or requester.id
    clinic = get_clinic(clinic_id)
    doctor = get_user_with_role(doctor_id, RoleChoices.DOCTOR, 'Doctor')

    try:
        with transaction.atomic():
            if TimetableSlot.objects.filter(doctor=doctor, datetime=when).exists():
                raise BadRequestError('Datetime already registered')
            slot = TimetableSlot.objects.create(doctor=doctor, clinic=clinic, datetime=when)
    except IntegrityError:
        raise BadRequestError('Datetime already registered')

    logger.info(
        'Timetable slot created',
        extra={'slot_id': str(slot.id), 'doctor_id': str(doctor.id), 'clinic_id': str(clinic.id)}
    )
    return slot


def update_slot(requester, slot_id, data: dict) -> TimetableSlot:
    """
    Move or reassign a free slot. A scheduled slot cannot change while its
    consultation exists.
    """
    try:
        with transaction.atomic():
            slot = get_slot(requester, slot_id, for_update=True)
            if slot.scheduled:
                raise BadRequestError('Timetable is already scheduled')

            doctor_id = data.get('doctor_id')
            if doctor_id and doctor_id != slot.doctor_id:
                if not is_administrator(requester):
                    raise UnauthorizedError('Not authorized to update this timetable')
                slot.doctor = get_user_with_role(doctor_id, RoleChoices.DOCTOR, 'Doctor')
            if data.get('clinic_id'):
                slot.clinic = get_clinic(data['clinic_id'])
            if data.get('datetime'):
                slot.datetime = data['datetime']

            duplicate = TimetableSlot.objects.filter(
                doctor_id=slot.doctor_id, datetime=slot.datetime
            ).exclude(pk=slot.pk)
            if duplicate.exists():
                raise BadRequestError('Datetime already registered')
            slot.save()
    except IntegrityError:
        raise BadRequestError('Datetime already registered')

    logger.info('Timetable slot updated', extra={'slot_id': str(slot.id)})
    return slot


def delete_slot(requester, slot_id) -> None:
    with transaction.atomic():
        slot = get_slot(requester, slot_id, for_update=True)
        if slot.scheduled:
            raise BadRequestError('Timetable is already scheduled')
        slot.delete()

    logger.info('Timetable slot deleted', extra={'slot_id': str(slot_id)})


# ============================================================================
# Consultation lifecycle
# ============================================================================

def book_consultation(
    requester,
    clinic_id,
    doctor_id,
    when: datetime,
    is_return: bool,
    patient_id=None,
) -> Consultation:
    """
    Book the doctor's free slot at ``when``.

    Checks run in this order:
    a) patient_id of someone else requires the assistant role (401)
    b) assistants must send patient_id (400)
    c) clinic exists (404)
    d) doctor exists (404) and holds the doctor role (400)
    e) patient, when given, exists (404) and holds the patient role (400)
    f) a slot exists for (doctor, when) (404)
    g) that slot is free (400)

    The consultation insert and the slot flip commit together.
    """
    try:
        consultation = _book(requester, clinic_id, doctor_id, when, is_return, patient_id)
    except WorkflowError as exc:
        metrics.consultation_bookings_total.labels(result=str(exc.status_code)).inc()
        raise

    metrics.consultation_bookings_total.labels(result='success').inc()
    log_consultation_event('consultation_booked', consultation, is_return=consultation.is_return)
    return consultation


def _book(requester, clinic_id, doctor_id, when, is_return, patient_id):
    is_assistant = has_role(requester, RoleChoices.ASSISTANT)

    if patient_id and patient_id != requester.id and not is_assistant:
        raise UnauthorizedError('Not authorized to book for another patient')
    if is_assistant and not patient_id:
        raise BadRequestError('Patient id required')

    clinic = get_clinic(clinic_id)
    doctor = get_user_with_role(doctor_id, RoleChoices.DOCTOR, 'Doctor')
    if patient_id:
        patient = get_user_with_role(patient_id, RoleChoices.PATIENT, 'Patient')
    else:
        patient = requester

    try:
        with transaction.atomic():
            slot = _lock_slot(doctor.id, when)
            if slot is None:
                raise NotFoundError('Date not available')
            if slot.scheduled:
                raise BadRequestError('Date already scheduled')

            consultation = Consultation.objects.create(
                clinic=clinic,
                doctor=doctor,
                patient=patient,
                datetime=when,
                is_return=is_return,
            )
            slot.scheduled = True
            slot.save(update_fields=['scheduled', 'updated_at'])

            _notify_schedule(consultation)
    except IntegrityError:
        raise BadRequestError('Date already scheduled')

    return consultation


def cancel_consultation(requester, consultation_id, now: Optional[datetime] = None) -> None:
    """
    User-initiated cancellation.

    Allowed for the consultation's patient or an assistant of its clinic,
    and only with at least CONSULTATION_CANCEL_MIN_DAYS whole days of notice.
    """
    now = now or timezone.now()

    with transaction.atomic():
        try:
            consultation = Consultation.objects.select_for_update().get(pk=consultation_id)
        except Consultation.DoesNotExist:
            raise NotFoundError('Consultation not found')

        if not _can_manage(requester, consultation):
            raise UnauthorizedError('Not authorized to cancel this consultation')

        days_left = (consultation.datetime - now).days
        if days_left < settings.CONSULTATION_CANCEL_MIN_DAYS:
            raise BadRequestError('Cancel period expired')

        _release_slot(consultation)
        _remove_consultation(consultation)

    metrics.consultation_cancellations_total.labels(source='user').inc()
    log_consultation_event('consultation_cancelled', consultation, days_left=days_left)


def auto_cancel_consultation(consultation_id, release_slot: bool = True) -> Optional[Consultation]:
    """
    Remove an unconfirmed consultation on behalf of the auto-cancel sweep.

    Returns None when the consultation is gone or was confirmed meanwhile.
    """
    with transaction.atomic():
        consultation = (
            Consultation.objects.select_for_update()
            .filter(pk=consultation_id, confirmed=False)
            .first()
        )
        if consultation is None:
            return None

        if release_slot:
            _release_slot(consultation)
        _remove_consultation(consultation)

    metrics.consultation_cancellations_total.labels(source='auto').inc()
    log_consultation_event('consultation_auto_cancelled', consultation, slot_released=release_slot)
    return consultation


def confirm_consultation(requester, consultation_id) -> Consultation:
    """
    Patient confirms attendance. A requester other than the patient gets
    a 400, not a 401.
    """
    with transaction.atomic():
        try:
            consultation = Consultation.objects.select_for_update().get(pk=consultation_id)
        except Consultation.DoesNotExist:
            raise NotFoundError('Consultation not found')

        if consultation.patient_id != requester.id:
            raise BadRequestError('Unauthorized')

        consultation.confirmed = True
        consultation.save(update_fields=['confirmed', 'updated_at'])

    metrics.consultation_confirmations_total.inc()
    log_consultation_event('consultation_confirmed', consultation)
    return consultation


def reassign_consultation(requester, consultation_id, data: dict) -> Consultation:
    """
    Change datetime, doctor, clinic or is_return of a consultation.

    Moving to another (doctor, datetime) frees the old slot and claims the
    new one in the same transaction, and resets the confirmation. Any change
    of datetime, doctor or clinic sends a new booking confirmation.
    """
    try:
        with transaction.atomic():
            try:
                consultation = Consultation.objects.select_for_update().get(pk=consultation_id)
            except Consultation.DoesNotExist:
                raise NotFoundError('Consultation not found')

            if not _can_manage(requester, consultation):
                raise UnauthorizedError('Not authorized to update this consultation')

            new_clinic_id = data.get('clinic_id') or consultation.clinic_id
            new_doctor_id = data.get('doctor_id') or consultation.doctor_id
            new_datetime = data.get('datetime') or consultation.datetime

            clinic_changed = new_clinic_id != consultation.clinic_id
            doctor_changed = new_doctor_id != consultation.doctor_id
            datetime_changed = new_datetime != consultation.datetime

            if clinic_changed:
                consultation.clinic = get_clinic(new_clinic_id)
            if doctor_changed:
                get_user_with_role(new_doctor_id, RoleChoices.DOCTOR, 'Doctor')

            if doctor_changed or datetime_changed:
                new_slot = _lock_slot(new_doctor_id, new_datetime)
                if new_slot is None:
                    raise NotFoundError('Date not available')
                if new_slot.scheduled:
                    raise BadRequestError('Date already scheduled')

                _release_slot(consultation)
                new_slot.scheduled = True
                new_slot.save(update_fields=['scheduled', 'updated_at'])

                consultation.doctor_id = new_doctor_id
                consultation.datetime = new_datetime
                consultation.confirmed = False

            if 'is_return' in data:
                consultation.is_return = data['is_return']
            consultation.save()

            if clinic_changed or doctor_changed or datetime_changed:
                _notify_schedule(consultation)
    except IntegrityError:
        raise BadRequestError('Date already scheduled')

    log_consultation_event(
        'consultation_reassigned',
        consultation,
        clinic_changed=clinic_changed,
        doctor_changed=doctor_changed,
        datetime_changed=datetime_changed,
    )
    return consultation


# ============================================================================
# Listings
# ============================================================================

def _parse_bound(value, end_of_day: bool):
    parsed = parse_datetime(value)
    if parsed is None:
        day = parse_date(value)
        if day is None:
            raise BadRequestError(f'Invalid date: {value}')
        parsed = datetime.combine(day, datetime.max.time() if end_of_day else datetime.min.time())
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def list_consultations(filters: dict):
    """
    Filter consultations by patient/doctor/clinic/is_return within a date
    range. Missing bounds default to the earliest and latest consultation.
    """
    queryset = Consultation.objects.select_related('clinic', 'doctor', 'patient')

    for field in ('patient_id', 'doctor_id', 'clinic_id'):
        if filters.get(field):
            queryset = queryset.filter(**{field: parse_uuid(filters[field], field)})

    is_return = filters.get('is_return')
    if is_return not in (None, ''):
        queryset = queryset.filter(is_return=str(is_return).lower() in ('1', 'true'))

    start = filters.get('start_date')
    end = filters.get('end_date')
    if not start or not end:
        bounds = Consultation.objects.aggregate(first=Min('datetime'), last=Max('datetime'))
        if bounds['first'] is None:
            return queryset.none()
    start = _parse_bound(start, end_of_day=False) if start else bounds['first']
    end = _parse_bound(end, end_of_day=True) if end else bounds['last']

    return queryset.filter(datetime__range=(start, end)).order_by('datetime')


def patient_consultations(requester):
    return (
        Consultation.objects.filter(patient_id=requester.id)
        .select_related('clinic', 'doctor', 'patient')
        .order_by('datetime')
    )


def doctor_consultations(requester):
    return (
        Consultation.objects.filter(doctor_id=requester.id)
        .select_related('clinic', 'doctor', 'patient')
        .order_by('datetime')
    )


def available_schedule(requester, clinic_id=None, specialty_id=None, now: Optional[datetime] = None):
    """
    Free future slots at a clinic for doctors of one specialty.

    Patients must name the clinic; assistants default to (and are limited
    to) their own clinic.
    """
    if not specialty_id:
        raise BadRequestError('Specialty id required')
    specialty_id = parse_uuid(specialty_id, 'specialty id')

    if not clinic_id and has_role(requester, RoleChoices.PATIENT):
        raise BadRequestError('Clinic id required')

    if clinic_id:
        clinic_id = parse_uuid(clinic_id, 'clinic id')
        if has_role(requester, RoleChoices.ASSISTANT) and clinic_id != requester.clinic_id:
            raise UnauthorizedError('Not authorized to see this clinic schedule')

    clinic = (
        Clinic.objects.select_related('address')
        .filter(pk=clinic_id or requester.clinic_id)
        .first()
    )
    if clinic is None:
        raise NotFoundError('Clinic not found')

    slots = (
        TimetableSlot.objects.filter(
            clinic=clinic,
            scheduled=False,
            doctor__specialty_id=specialty_id,
            datetime__gte=now or timezone.now(),
        )
        .select_related('doctor')
        .order_by('datetime')
    )
    return clinic, slots
