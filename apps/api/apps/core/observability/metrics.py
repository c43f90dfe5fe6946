"""
Prometheus metrics for the clinic API.
"""
import time
from functools import wraps

from prometheus_client import Counter, Histogram


class MetricsRegistry:
    """
    Central metrics registry.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        self._setup_metrics()

    def _setup_metrics(self):
        # ===================================================================
        # HTTP Metrics
        # ===================================================================
        self.http_requests_total = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'status']
        )

        # ===================================================================
        # Consultation Metrics
        # ===================================================================
        self.consultation_bookings_total = Counter(
            'consultation_bookings_total',
            'Consultation booking attempts',
            ['result']  # success or rejection status code
        )

        self.consultation_cancellations_total = Counter(
            'consultation_cancellations_total',
            'Consultations removed',
            ['source']  # user, auto
        )

        self.consultation_confirmations_total = Counter(
            'consultation_confirmations_total',
            'Consultations confirmed by patients'
        )

        # ===================================================================
        # Notification Metrics
        # ===================================================================
        self.notification_sweep_consultations_total = Counter(
            'notification_sweep_consultations_total',
            'Consultations selected by daily sweeps',
            ['sweep']  # reminder, auto_cancel
        )

        self.notification_mail_total = Counter(
            'notification_mail_total',
            'Notification mails processed',
            ['template', 'result']  # result: sent, failed
        )

        self.notification_job_duration_seconds = Histogram(
            'notification_job_duration_seconds',
            'Duration of notification jobs',
            ['job'],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
        )

    def track_duration(self, histogram_metric, **labels):
        """
        Decorator to track function duration.

        Usage:
            @metrics.track_duration(metrics.notification_job_duration_seconds, job='reminder')
            def handle(batch):
                ...
        """
        def decorator(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    metric = histogram_metric.labels(**labels) if labels else histogram_metric
                    metric.observe(time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics = MetricsRegistry()
