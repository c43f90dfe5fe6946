"""
Shared response helpers for API views.
"""
from rest_framework.response import Response

from apps.core.exceptions import WorkflowError


def error_response(exc: WorkflowError) -> Response:
    """Render a workflow error the way every endpoint reports failures."""
    return Response({'error': exc.message}, status=exc.status_code)


class WorkflowErrorMixin:
    """
    Turns WorkflowError raised by a view handler into an error response.

    Mixed into APIView/ViewSet classes so handlers can call services
    directly without wrapping every call in try/except.
    """

    def handle_exception(self, exc):
        if isinstance(exc, WorkflowError):
            return error_response(exc)
        return super().handle_exception(exc)
