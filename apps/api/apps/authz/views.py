"""
Authz views: users, password reset, roles and permissions.
"""
import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.models import Permission, Role, User
from apps.authz.permissions import IsAdministrator
from apps.authz.roles import is_administrator
from apps.authz.serializers import (
    ForgotPasswordRequestSerializer,
    ForgotPasswordResetSerializer,
    PermissionSerializer,
    RoleAssignmentSerializer,
    RoleSerializer,
    UserRegistrationSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from apps.authz.services import (
    assign_roles,
    register_user,
    request_password_reset,
    reset_password,
    set_role_permissions,
)
from apps.core.exceptions import ForbiddenError, NotFoundError
from apps.core.responses import WorkflowErrorMixin

logger = logging.getLogger(__name__)


class UserViewSet(WorkflowErrorMixin, viewsets.ModelViewSet):
    """
    Endpoints:
    - POST /api/v1/users/ - Sign up (anonymous)
    - GET /api/v1/users/ - List users (administrator)
    - GET/PATCH/DELETE /api/v1/users/{id}/ - Self or administrator, 403 otherwise
    - POST /api/v1/users/{id}/roles/ - Replace roles (administrator)
    """
    queryset = User.objects.prefetch_related('user_roles__role').order_by('email')
    serializer_class = UserSerializer
    http_method_names = ['get', 'post', 'patch', 'put', 'delete', 'head', 'options']

    def get_permissions(self):
        if self.action == 'create':
            return [AllowAny()]
        if self.action in ('list', 'roles'):
            return [IsAdministrator()]
        return [IsAuthenticated()]

    def get_object(self):
        try:
            user = User.objects.get(pk=self.kwargs['pk'])
        except (User.DoesNotExist, ValueError):
            raise NotFoundError('User not found')

        if self.action != 'roles' and user.id != self.request.user.id \
                and not is_administrator(self.request.user):
            raise ForbiddenError('Not allowed to access this user')
        return user

    def create(self, request, *args, **kwargs):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = register_user(serializer.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        user = self.get_object()
        serializer = UserUpdateSerializer(user, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('User updated', extra={'user_id': str(user.id), 'fields': sorted(serializer.validated_data)})
        return Response(UserSerializer(user).data)

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        user_id = str(user.id)
        user.delete()
        logger.info('User deleted', extra={'user_id': user_id})
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def roles(self, request, pk=None):
        user = self.get_object()
        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assign_roles(
            user,
            serializer.validated_data['roles'],
            serializer.validated_data.get('permissions'),
        )
        return Response(UserSerializer(user).data)


class ForgotPasswordView(WorkflowErrorMixin, APIView):
    """
    POST /api/v1/users/forgot/ - Request a reset token by email
    PATCH /api/v1/users/forgot/ - Set a new password with the token
    """
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = ForgotPasswordRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        request_password_reset(serializer.validated_data['email'])
        return Response(status=status.HTTP_204_NO_CONTENT)

    def patch(self, request):
        serializer = ForgotPasswordResetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reset_password(
            serializer.validated_data['token'],
            serializer.validated_data['password'],
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class RoleViewSet(WorkflowErrorMixin, viewsets.ModelViewSet):
    """Role CRUD (administrator)."""
    queryset = Role.objects.prefetch_related('permissions').all()
    serializer_class = RoleSerializer
    permission_classes = [IsAdministrator]

    def perform_create(self, serializer):
        permissions = serializer.validated_data.pop('permissions', None)
        role = serializer.save()
        if permissions is not None:
            set_role_permissions(role, permissions)

    def perform_update(self, serializer):
        permissions = serializer.validated_data.pop('permissions', None)
        role = serializer.save()
        if permissions is not None:
            set_role_permissions(role, permissions)


class PermissionViewSet(viewsets.ModelViewSet):
    """Permission CRUD (administrator)."""
    queryset = Permission.objects.all()
    serializer_class = PermissionSerializer
    permission_classes = [IsAdministrator]
