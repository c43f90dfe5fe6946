"""
Celery tasks for consultation notifications.

Each task runs under a per-job-key lock (one execution per key at a time).
A task that finds its key busy re-queues itself instead of running in
parallel. Items of a batch are processed independently: one failing mail
is logged and the rest of the batch goes on.
"""
import logging

from celery import shared_task
from django.conf import settings

from apps.core.observability import metrics
from apps.core.observability.correlation import bind_job_context
from apps.notifications import mail
from apps.notifications.locks import JobBusy, job_lock

logger = logging.getLogger(__name__)

MAX_RETRIES = settings.NOTIFICATION_JOB_MAX_ATTEMPTS - 1

REMINDER_JOB = 'confirmation_reminder'
AUTO_CANCEL_JOB = 'auto_cancel'
BOOKING_JOB = 'booking_confirmation'
FORGOT_PASSWORD_JOB = 'forgot_password'


def _run_locked(task, job_key, handler, *args):
    bind_job_context(job_key, task.request.id)
    try:
        with job_lock(job_key):
            return handler(*args)
    except JobBusy:
        logger.info('Notification job busy, requeued', extra={'job': job_key})
        task.apply_async(args=args, countdown=settings.NOTIFICATION_JOB_REQUEUE_COUNTDOWN)
        return None
    except Exception as exc:
        logger.exception('Notification job failed', extra={'job': job_key})
        raise task.retry(exc=exc, countdown=settings.NOTIFICATION_JOB_REQUEUE_COUNTDOWN)


# ============================================================================
# Handlers
# ============================================================================

@metrics.track_duration(metrics.notification_job_duration_seconds, job=REMINDER_JOB)
def handle_confirmation_reminders(batch):
    sent = 0
    for context in batch:
        try:
            mail.send_consultation_mail(mail.CONFIRMATION_REMINDER, context)
            sent += 1
        except Exception:
            logger.exception(
                'Confirmation reminder failed',
                extra={'consultation_id': context.get('consultation_id')}
            )
    return sent


@metrics.track_duration(metrics.notification_job_duration_seconds, job=AUTO_CANCEL_JOB)
def handle_auto_cancellations(batch):
    """
    Notify then remove each consultation that is still unconfirmed.

    Consultations confirmed or removed since the sweep are skipped.
    """
    from apps.scheduling.models import Consultation
    from apps.scheduling.services import auto_cancel_consultation

    cancelled = 0
    for context in batch:
        consultation_id = context['consultation_id']
        try:
            if not Consultation.objects.filter(pk=consultation_id, confirmed=False).exists():
                logger.info('Auto-cancel skipped', extra={'consultation_id': consultation_id})
                continue
            mail.send_consultation_mail(mail.CANCELLATION_NOTICE, context)
            removed = auto_cancel_consultation(
                consultation_id,
                release_slot=settings.CONSULTATION_AUTO_CANCEL_RELEASES_SLOT,
            )
            if removed is not None:
                cancelled += 1
        except Exception:
            logger.exception('Auto-cancel failed', extra={'consultation_id': consultation_id})
    return cancelled


@metrics.track_duration(metrics.notification_job_duration_seconds, job=BOOKING_JOB)
def handle_booking_confirmation(consultation_id):
    from apps.scheduling.models import Consultation

    consultation = (
        Consultation.objects.select_related('clinic__owner', 'doctor__specialty', 'patient')
        .filter(pk=consultation_id)
        .first()
    )
    if consultation is None:
        logger.info('Booking confirmation skipped', extra={'consultation_id': str(consultation_id)})
        return False
    mail.send_consultation_mail(mail.BOOKING_CONFIRMATION, mail.consultation_context(consultation))
    return True


@metrics.track_duration(metrics.notification_job_duration_seconds, job=FORGOT_PASSWORD_JOB)
def handle_forgot_password(user_id):
    from apps.authz.models import User

    user = User.objects.filter(pk=user_id).first()
    if user is None or not user.token:
        logger.info('Forgot password mail skipped', extra={'user_id': str(user_id)})
        return False
    mail.send_forgot_password_mail(user)
    return True


# ============================================================================
# Tasks
# ============================================================================

@shared_task(name='apps.notifications.tasks.run_daily_sweeps')
def run_daily_sweeps():
    """Beat entry point: run both consultation sweeps for today."""
    from apps.notifications.sweeps import run_daily_sweep

    bind_job_context('daily_sweep')
    results = run_daily_sweep()
    return {result.sweep: len(result.consultation_ids) for result in results}


@shared_task(bind=True, name='apps.notifications.tasks.send_confirmation_reminders', max_retries=MAX_RETRIES)
def send_confirmation_reminders(self, batch):
    return _run_locked(self, REMINDER_JOB, handle_confirmation_reminders, batch)


@shared_task(bind=True, name='apps.notifications.tasks.cancel_unconfirmed_consultations', max_retries=MAX_RETRIES)
def cancel_unconfirmed_consultations(self, batch):
    return _run_locked(self, AUTO_CANCEL_JOB, handle_auto_cancellations, batch)


@shared_task(bind=True, name='apps.notifications.tasks.send_booking_confirmation', max_retries=MAX_RETRIES)
def send_booking_confirmation(self, consultation_id):
    return _run_locked(self, BOOKING_JOB, handle_booking_confirmation, consultation_id)


@shared_task(bind=True, name='apps.notifications.tasks.send_forgot_password_mail', max_retries=MAX_RETRIES)
def send_forgot_password_mail(self, user_id):
    return _run_locked(self, FORGOT_PASSWORD_JOB, handle_forgot_password, user_id)


# ============================================================================
# Dispatch helpers (called after commit by services)
# ============================================================================

def dispatch_booking_confirmation(consultation_id):
    send_booking_confirmation.apply_async(args=[str(consultation_id)])


def dispatch_forgot_password_mail(user_id):
    send_forgot_password_mail.apply_async(args=[str(user_id)])
