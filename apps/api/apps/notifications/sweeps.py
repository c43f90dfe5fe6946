"""
Daily consultation sweeps.

Both sweeps are plain functions over "now": they select the consultations
of one local calendar day a fixed number of days ahead and dispatch a
single Celery job for the batch. Celery beat calls run_daily_sweep once
a day; tests call it with a fixed clock.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import List, Optional, Tuple

from django.conf import settings
from django.utils import timezone

from apps.core.observability import metrics
from apps.core.observability.events import log_sweep_completed
from apps.notifications import tasks
from apps.notifications.mail import consultation_context
from apps.scheduling.models import Consultation

logger = logging.getLogger(__name__)

REMINDER_SWEEP = 'reminder'
AUTO_CANCEL_SWEEP = 'auto_cancel'


@dataclass
class SweepResult:
    sweep: str
    window_start: datetime
    window_end: datetime
    consultation_ids: List[str] = field(default_factory=list)
    dispatched: bool = False


def consultation_window(now: datetime, days_ahead: int) -> Tuple[datetime, datetime]:
    """Start and end of the local calendar day ``days_ahead`` days after ``now``."""
    day = timezone.localtime(now).date() + timedelta(days=days_ahead)
    start = timezone.make_aware(datetime.combine(day, time.min))
    end = timezone.make_aware(datetime.combine(day, time.max))
    return start, end


def _consultations_in(start, end, **filters):
    return (
        Consultation.objects.filter(datetime__range=(start, end), **filters)
        .select_related('clinic__owner', 'doctor__specialty', 'patient')
        .order_by('datetime')
    )


def _sweep(sweep, days_ahead, task, now, **filters) -> SweepResult:
    start, end = consultation_window(now or timezone.now(), days_ahead)
    batch = [consultation_context(consultation) for consultation in _consultations_in(start, end, **filters)]
    result = SweepResult(
        sweep=sweep,
        window_start=start,
        window_end=end,
        consultation_ids=[context['consultation_id'] for context in batch],
    )

    if batch:
        task.apply_async(args=[batch])
        result.dispatched = True

    metrics.notification_sweep_consultations_total.labels(sweep=sweep).inc(len(batch))
    log_sweep_completed(sweep, start, end, len(batch), result.dispatched)
    return result


def run_confirmation_reminder_sweep(now: Optional[datetime] = None) -> SweepResult:
    """Remind every consultation in the reminder window, confirmed or not."""
    return _sweep(
        REMINDER_SWEEP,
        settings.CONSULTATION_REMINDER_DAYS_AHEAD,
        tasks.send_confirmation_reminders,
        now,
    )


def run_auto_cancellation_sweep(now: Optional[datetime] = None) -> SweepResult:
    """Queue removal of the unconfirmed consultations in the auto-cancel window."""
    return _sweep(
        AUTO_CANCEL_SWEEP,
        settings.CONSULTATION_AUTO_CANCEL_DAYS_AHEAD,
        tasks.cancel_unconfirmed_consultations,
        now,
        confirmed=False,
    )


def run_daily_sweep(now: Optional[datetime] = None) -> List[SweepResult]:
    now = now or timezone.now()
    results = [
        run_confirmation_reminder_sweep(now),
        run_auto_cancellation_sweep(now),
    ]
    logger.info(
        'Daily sweep finished',
        extra={result.sweep: len(result.consultation_ids) for result in results}
    )
    return results
