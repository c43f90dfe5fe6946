"""
Notification mails.

Mail contexts are plain dicts of strings so they can travel through the
Celery broker as JSON. Templates live under templates/emails/ as a text
and an HTML variant.
"""
import logging
from email.utils import formataddr

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from apps.core.observability import metrics

logger = logging.getLogger(__name__)

BOOKING_CONFIRMATION = 'consultation_scheduled'
CONFIRMATION_REMINDER = 'confirmation_reminder'
CANCELLATION_NOTICE = 'consultation_cancellation'
FORGOT_PASSWORD = 'forgot_password'

SUBJECTS = {
    BOOKING_CONFIRMATION: 'Your consultation is scheduled',
    CONFIRMATION_REMINDER: 'Please confirm your consultation',
    CANCELLATION_NOTICE: 'Your consultation was cancelled',
    FORGOT_PASSWORD: 'Password recovery',
}


def clinic_sender(owner) -> str:
    """'<owner> | Doctor's Clinic' from the clinic owner, or the default sender."""
    if owner is None or not owner.email:
        return settings.DEFAULT_FROM_EMAIL
    return formataddr((f"{owner.full_name or owner.email} | Doctor's Clinic", owner.email))


def consultation_context(consultation) -> dict:
    """
    Mail context for a consultation.

    Expects clinic__owner, doctor__specialty and patient to be loaded.
    """
    doctor = consultation.doctor
    clinic = consultation.clinic
    return {
        'consultation_id': str(consultation.id),
        'patient_id': str(consultation.patient_id),
        'patient_name': consultation.patient.full_name,
        'patient_email': consultation.patient.email,
        'date': timezone.localtime(consultation.datetime).strftime('%d/%m/%Y %H:%M'),
        'clinic_name': clinic.name,
        'clinic_phone': clinic.phone,
        'doctor_name': doctor.full_name,
        'specialty': doctor.specialty.name if doctor.specialty_id else '',
        'sender': clinic_sender(clinic.owner),
        'confirmation_link': f'{settings.CONFIRMATION_LINK_URL}/{consultation.id}',
    }


def send_template_mail(template: str, to: str, context: dict, from_email: str = None) -> None:
    """
    Render ``template`` and send it to one recipient.

    Failures are counted and re-raised; callers decide whether a batch goes on.
    """
    message = EmailMultiAlternatives(
        subject=SUBJECTS[template],
        body=render_to_string(f'emails/{template}.txt', context),
        from_email=from_email or settings.DEFAULT_FROM_EMAIL,
        to=[to],
    )
    message.attach_alternative(render_to_string(f'emails/{template}.html', context), 'text/html')

    try:
        message.send()
    except Exception:
        metrics.notification_mail_total.labels(template=template, result='failed').inc()
        raise

    metrics.notification_mail_total.labels(template=template, result='sent').inc()
    logger.info('Notification mail sent', extra={'template': template})


def send_consultation_mail(template: str, context: dict) -> None:
    send_template_mail(template, context['patient_email'], context, context['sender'])


def send_forgot_password_mail(user) -> None:
    send_template_mail(
        FORGOT_PASSWORD,
        user.email,
        {
            'name': user.full_name or user.email,
            'token': user.token,
            'ttl_days': settings.PASSWORD_RESET_TOKEN_TTL_DAYS,
        },
    )
