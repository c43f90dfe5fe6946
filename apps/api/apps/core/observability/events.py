"""
Domain event logging helpers.

Business operations of the consultation workflow log one structured
event each; only ids and outcome fields are recorded.
"""
from typing import Dict, Optional

from .logging import get_sanitized_logger, sanitize_dict

logger = get_sanitized_logger(__name__)


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_ids: Optional[Dict[str, str]] = None,
    result: str = 'success',
    **extra_fields
):
    """
    Log a domain event with structured data.

    Args:
        event_name: Name of the event (e.g. 'consultation_booked')
        entity_type: Type of entity (e.g. 'Consultation')
        entity_id: ID of primary entity
        entity_ids: Dictionary of related entity IDs
        result: success, failure, blocked...
        **extra_fields: Additional fields (sanitized before logging)

    Example:
        log_domain_event(
            'consultation_booked',
            entity_type='Consultation',
            entity_id=str(consultation.id),
            entity_ids={'doctor_id': str(consultation.doctor_id)},
        )
    """
    event_data = {
        'event': event_name,
        'result': result,
    }

    if entity_type:
        event_data['entity_type'] = entity_type

    if entity_id:
        event_data['entity_id'] = entity_id

    if entity_ids:
        event_data.update(entity_ids)

    event_data.update(sanitize_dict(extra_fields))

    if result in ['failure', 'error']:
        logger.error(f'Domain event: {event_name}', extra=event_data)
    elif result in ['warning', 'blocked']:
        logger.warning(f'Domain event: {event_name}', extra=event_data)
    else:
        logger.info(f'Domain event: {event_name}', extra=event_data)


def log_consultation_event(event_name, consultation, result='success', **extra):
    """Log an event about a consultation with its slot coordinates."""
    log_domain_event(
        event_name,
        entity_type='Consultation',
        entity_id=str(consultation.id),
        entity_ids={
            'consultation_id': str(consultation.id),
            'doctor_id': str(consultation.doctor_id),
            'clinic_id': str(consultation.clinic_id),
            'patient_id': str(consultation.patient_id),
        },
        result=result,
        datetime=consultation.datetime.isoformat(),
        **extra
    )


def log_sweep_completed(sweep, window_start, window_end, consultations_count, dispatched):
    """Log the outcome of one notification sweep."""
    log_domain_event(
        'notification_sweep_completed',
        entity_type='NotificationSweep',
        result='success',
        sweep=sweep,
        window_start=window_start.isoformat(),
        window_end=window_end.isoformat(),
        consultations_count=consultations_count,
        dispatched=dispatched,
    )
