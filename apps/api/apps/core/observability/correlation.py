"""
Request correlation middleware.

Generates or propagates X-Request-ID and exposes it to log records.
"""
import uuid
import time
import logging
from threading import local

from django.utils.deprecation import MiddlewareMixin

from .metrics import metrics

_request_context = local()

logger = logging.getLogger(__name__)


def get_request_id():
    """Get current request ID from thread-local storage."""
    return getattr(_request_context, 'request_id', None)


def get_user_id():
    """Get current user ID from thread-local storage."""
    return getattr(_request_context, 'user_id', None)


def bind_job_context(job_key, job_id=None):
    """
    Bind a correlation id for background work.

    Celery tasks have no request, so the task id (or a fresh uuid) is used
    as request_id for every record logged by the job.
    """
    _request_context.request_id = job_id or f'{job_key}-{uuid.uuid4().hex[:12]}'
    _request_context.user_id = None


class RequestCorrelationMiddleware(MiddlewareMixin):
    """
    Handles request correlation.

    - Generates/propagates X-Request-ID
    - Stores request and user id in thread-local storage for log records
    - Logs request completion with duration and counts it
    """

    REQUEST_ID_HEADER = 'HTTP_X_REQUEST_ID'

    def process_request(self, request):
        request_id = request.META.get(self.REQUEST_ID_HEADER) or str(uuid.uuid4())

        request.request_id = request_id
        request.start_time = time.time()
        _request_context.request_id = request_id

        # JWT auth runs inside the DRF view; only session users are known here
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            _request_context.user_id = str(user.id)
        else:
            _request_context.user_id = None

    def process_response(self, request, response):
        if hasattr(request, 'request_id'):
            response['X-Request-ID'] = request.request_id

        if hasattr(request, 'start_time'):
            duration_ms = (time.time() - request.start_time) * 1000
            user = getattr(request, 'user', None)
            user_id = get_user_id()
            if user_id is None and user is not None and user.is_authenticated:
                user_id = str(user.id)

            metrics.http_requests_total.labels(
                method=request.method,
                status=str(response.status_code)
            ).inc()
            logger.info(
                'Request completed',
                extra={
                    'event': 'http_request_completed',
                    'path': request.path,
                    'method': request.method,
                    'status_code': response.status_code,
                    'duration_ms': round(duration_ms, 2),
                    'request_id': getattr(request, 'request_id', None),
                    'user_id': user_id,
                }
            )

        clear_request_context()
        return response

    def process_exception(self, request, exception):
        duration_ms = 0
        if hasattr(request, 'start_time'):
            duration_ms = (time.time() - request.start_time) * 1000

        logger.error(
            f'Request failed: {exception.__class__.__name__}',
            exc_info=True,
            extra={
                'event': 'http_request_exception',
                'path': request.path,
                'method': request.method,
                'exception_type': exception.__class__.__name__,
                'duration_ms': round(duration_ms, 2),
                'request_id': getattr(request, 'request_id', None),
                'user_id': get_user_id(),
            }
        )


def clear_request_context():
    """Clear thread-local request context."""
    for attr in ['request_id', 'user_id']:
        if hasattr(_request_context, attr):
            delattr(_request_context, attr)
