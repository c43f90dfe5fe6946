"""
Authz URLs - users, password reset, roles and permissions
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import ForgotPasswordView, PermissionViewSet, RoleViewSet, UserViewSet

router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')
router.register(r'roles', RoleViewSet, basename='role')
router.register(r'permissions', PermissionViewSet, basename='permission')

urlpatterns = [
    # Must precede the router so 'forgot' is not read as a user id
    path('users/forgot/', ForgotPasswordView.as_view(), name='users-forgot'),
    path('', include(router.urls)),
]
