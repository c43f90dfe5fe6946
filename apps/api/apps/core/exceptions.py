"""
Workflow errors raised by service functions.

Views translate them into ``{'error': message}`` responses with the
class status code. Raising inside ``transaction.atomic()`` rolls the
transaction back before the response is built.
"""
from rest_framework import status


class WorkflowError(Exception):
    """Base class for business-rule failures."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid request'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(WorkflowError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid request'


class UnauthorizedError(WorkflowError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = 'Not authorized to perform this action'


class ForbiddenError(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'Not allowed to access this resource'


class NotFoundError(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found'
