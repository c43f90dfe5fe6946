"""
Observability for the clinic API.

Structured logging with correlation ids, domain events, Prometheus
counters and health probes.
"""
from .metrics import metrics
from .events import log_domain_event
from .logging import get_sanitized_logger

__all__ = ['metrics', 'log_domain_event', 'get_sanitized_logger']
