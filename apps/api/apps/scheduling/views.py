"""
Scheduling views.

Endpoints:
- /api/v1/timetables/ - doctor slots (doctor or administrator)
- /api/v1/consultations/ - book, list, reassign, cancel
- PATCH /api/v1/confirmations/consultation/{id}/ - patient confirmation
- GET /api/v1/patient/consultations/, /api/v1/doctor/consultations/
- GET /api/v1/schedules/ - free slots by clinic and specialty
"""
import logging

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import (
    IsAssistant,
    IsDoctor,
    IsDoctorOrAdministrator,
    IsPatient,
    IsPatientOrAssistant,
)
from apps.core.responses import WorkflowErrorMixin
from apps.scheduling import services
from apps.scheduling.serializers import (
    ConsultationBookingSerializer,
    ConsultationReassignSerializer,
    ConsultationSerializer,
    TimetableSlotSerializer,
    TimetableSlotUpdateSerializer,
    TimetableSlotWriteSerializer,
    serialize_schedule,
)

logger = logging.getLogger(__name__)


class PaginatedListMixin:
    """Paginate a service queryset with the view's paginator."""

    def paginated(self, queryset, serializer_class):
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(serializer_class(page, many=True).data)
        return Response(serializer_class(queryset, many=True).data)


class TimetableViewSet(WorkflowErrorMixin, PaginatedListMixin, viewsets.GenericViewSet):
    """
    Doctor timetable slots.

    Non-administrators only see and touch their own slots (401 otherwise).
    """
    permission_classes = [IsDoctorOrAdministrator]
    serializer_class = TimetableSlotSerializer

    def list(self, request):
        return self.paginated(services.list_slots(request.user), TimetableSlotSerializer)

    def retrieve(self, request, pk=None):
        slot = services.get_slot(request.user, services.parse_uuid(pk, 'timetable id'))
        return Response(TimetableSlotSerializer(slot).data)

    def create(self, request):
        serializer = TimetableSlotWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        slot = services.create_slot(
            request.user,
            data['datetime'],
            data['clinic_id'],
            data.get('doctor_id'),
        )
        return Response(TimetableSlotSerializer(slot).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        serializer = TimetableSlotUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot = services.update_slot(
            request.user,
            services.parse_uuid(pk, 'timetable id'),
            serializer.validated_data,
        )
        return Response(TimetableSlotSerializer(slot).data)

    def destroy(self, request, pk=None):
        services.delete_slot(request.user, services.parse_uuid(pk, 'timetable id'))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ConsultationViewSet(WorkflowErrorMixin, PaginatedListMixin, viewsets.GenericViewSet):
    """
    Consultation lifecycle.

    Booking, reassignment and cancellation are open to patients and
    assistants; the filtered listing to assistants only.
    """
    serializer_class = ConsultationSerializer

    def get_permissions(self):
        if self.action == 'list':
            return [IsAssistant()]
        return [IsPatientOrAssistant()]

    def list(self, request):
        queryset = services.list_consultations(request.query_params)
        return self.paginated(queryset, ConsultationSerializer)

    def create(self, request):
        serializer = ConsultationBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        consultation = services.book_consultation(
            request.user,
            clinic_id=data['clinic_id'],
            doctor_id=data['doctor_id'],
            when=data['datetime'],
            is_return=data['is_return'],
            patient_id=data.get('patient_id'),
        )
        return Response(ConsultationSerializer(consultation).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        serializer = ConsultationReassignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        consultation = services.reassign_consultation(
            request.user,
            services.parse_uuid(pk, 'consultation id'),
            serializer.validated_data,
        )
        return Response(ConsultationSerializer(consultation).data)

    def destroy(self, request, pk=None):
        services.cancel_consultation(request.user, services.parse_uuid(pk, 'consultation id'))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ConsultationConfirmationView(WorkflowErrorMixin, APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        consultation = services.confirm_consultation(request.user, pk)
        return Response(ConsultationSerializer(consultation).data)


class PatientConsultationListView(WorkflowErrorMixin, PaginatedListMixin, viewsets.GenericViewSet):
    permission_classes = [IsPatient]

    def list(self, request):
        return self.paginated(services.patient_consultations(request.user), ConsultationSerializer)


class DoctorConsultationListView(WorkflowErrorMixin, PaginatedListMixin, viewsets.GenericViewSet):
    permission_classes = [IsDoctor]

    def list(self, request):
        return self.paginated(services.doctor_consultations(request.user), ConsultationSerializer)


class ScheduleView(WorkflowErrorMixin, APIView):
    """Free slots at a clinic for one specialty."""
    permission_classes = [IsPatientOrAssistant]

    def get(self, request):
        clinic, slots = services.available_schedule(
            request.user,
            clinic_id=request.query_params.get('clinic_id'),
            specialty_id=request.query_params.get('specialty_id'),
        )
        return Response(serialize_schedule(clinic, slots))
