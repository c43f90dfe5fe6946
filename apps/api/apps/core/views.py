"""
Clinic viewset.

Endpoints (administrator route guard):
- GET /api/v1/clinics/ - Clinics owned by the requester (paginated)
- POST /api/v1/clinics/
- GET/PATCH/PUT/DELETE /api/v1/clinics/{id}/ - 404 missing, 403 not owner
"""
import logging

from rest_framework import status, viewsets
from rest_framework.response import Response

from apps.authz.permissions import IsAdministrator
from apps.core.exceptions import ForbiddenError, NotFoundError
from apps.core.models import Clinic
from apps.core.responses import WorkflowErrorMixin
from apps.core.serializers import ClinicSerializer, ClinicWriteSerializer
from apps.core.services import create_clinic, update_clinic

logger = logging.getLogger(__name__)


class ClinicViewSet(WorkflowErrorMixin, viewsets.ModelViewSet):
    permission_classes = [IsAdministrator]
    serializer_class = ClinicSerializer

    def get_queryset(self):
        return (
            Clinic.objects.filter(owner=self.request.user)
            .select_related('owner', 'address')
            .prefetch_related('specialties')
            .order_by('name')
        )

    def get_object(self):
        try:
            clinic = Clinic.objects.select_related('owner').get(pk=self.kwargs['pk'])
        except (Clinic.DoesNotExist, ValueError):
            raise NotFoundError('Clinic not found')
        if clinic.owner_id != self.request.user.id:
            raise ForbiddenError('Not allowed to access this clinic')
        return clinic

    def create(self, request, *args, **kwargs):
        serializer = ClinicWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        clinic = create_clinic(request.user, dict(serializer.validated_data))
        return Response(ClinicSerializer(clinic).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        clinic = self.get_object()
        serializer = ClinicWriteSerializer(clinic, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        clinic = update_clinic(clinic, dict(serializer.validated_data))
        return Response(ClinicSerializer(clinic).data)

    def destroy(self, request, *args, **kwargs):
        clinic = self.get_object()
        clinic_id = str(clinic.id)
        clinic.delete()
        logger.info('Clinic deleted', extra={'clinic_id': clinic_id})
        return Response(status=status.HTTP_204_NO_CONTENT)
