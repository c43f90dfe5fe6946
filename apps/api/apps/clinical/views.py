"""
Clinical record endpoints.

Every handler delegates to apps.clinical.services, which enforces the
consultation-doctor guard (401) before touching any row.

- POST /api/v1/diagnostics/, GET /api/v1/diagnostics/{id}/
- /api/v1/prescriptions/ - CRUD, list by ?diagnostic_id
- POST /api/v1/referrals/, PATCH|DELETE /api/v1/referrals/{id}/
- PATCH /api/v1/consultation/{id}/exams/ - replace requested exams
- POST /api/v1/exam/results/, PATCH|DELETE /api/v1/exam/results/{id}/
"""
import logging

from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.clinical import services
from apps.clinical.serializers import (
    DiagnosticSerializer,
    DiagnosticWriteSerializer,
    ExamRequestSerializer,
    ExamResultSerializer,
    ExamResultWriteSerializer,
    PrescriptionSerializer,
    PrescriptionWriteSerializer,
    ReferralSerializer,
    ReferralWriteSerializer,
)
from apps.core.responses import WorkflowErrorMixin
from apps.scheduling.services import parse_uuid
from apps.scheduling.views import PaginatedListMixin

logger = logging.getLogger(__name__)


class DiagnosticViewSet(WorkflowErrorMixin, viewsets.GenericViewSet):
    """Create once, read by the consultation's doctor or patient."""
    serializer_class = DiagnosticSerializer

    def create(self, request):
        serializer = DiagnosticWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        diagnostic = services.create_diagnostic(
            request.user,
            consultation_id=data['consultation_id'],
            report=data['report'],
            condition_id=data['condition_id'],
            surgery_id=data.get('surgery_id'),
            operation_date=data.get('operation_date'),
        )
        return Response(DiagnosticSerializer(diagnostic).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        diagnostic = services.get_diagnostic(request.user, parse_uuid(pk, 'diagnostic id'))
        return Response(DiagnosticSerializer(diagnostic).data)


class PrescriptionViewSet(WorkflowErrorMixin, PaginatedListMixin, viewsets.GenericViewSet):
    serializer_class = PrescriptionSerializer

    def list(self, request):
        queryset = services.list_prescriptions(request.user, request.query_params.get('diagnostic_id'))
        return self.paginated(queryset, PrescriptionSerializer)

    def retrieve(self, request, pk=None):
        prescription = services.get_prescription(request.user, parse_uuid(pk, 'prescription id'))
        return Response(PrescriptionSerializer(prescription).data)

    def create(self, request):
        serializer = PrescriptionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        prescription = services.create_prescription(request.user, serializer.validated_data)
        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        serializer = PrescriptionWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        prescription = services.update_prescription(
            request.user,
            parse_uuid(pk, 'prescription id'),
            serializer.validated_data,
        )
        return Response(PrescriptionSerializer(prescription).data)

    def destroy(self, request, pk=None):
        services.delete_prescription(request.user, parse_uuid(pk, 'prescription id'))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ReferralViewSet(WorkflowErrorMixin, viewsets.GenericViewSet):
    serializer_class = ReferralSerializer

    def create(self, request):
        serializer = ReferralWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        referral = services.create_referral(
            request.user,
            serializer.validated_data['consultation_id'],
            serializer.validated_data['specialty_id'],
        )
        return Response(ReferralSerializer(referral).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        serializer = ReferralWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        referral = services.update_referral(
            request.user,
            parse_uuid(pk, 'referral id'),
            serializer.validated_data,
        )
        return Response(ReferralSerializer(referral).data)

    def destroy(self, request, pk=None):
        # Referrals are kept; the route answers without deleting.
        return Response(status=status.HTTP_204_NO_CONTENT)


class ConsultationExamsView(WorkflowErrorMixin, APIView):
    def patch(self, request, pk):
        exam_requests = services.sync_exam_requests(request.user, pk, request.data.get('exams'))
        return Response(ExamRequestSerializer(exam_requests, many=True).data)


class ExamResultViewSet(WorkflowErrorMixin, viewsets.GenericViewSet):
    serializer_class = ExamResultSerializer

    def create(self, request):
        serializer = ExamResultWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        exam_result = services.create_exam_result(request.user, serializer.validated_data)
        return Response(ExamResultSerializer(exam_result).data, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        serializer = ExamResultWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        exam_result = services.update_exam_result(
            request.user,
            parse_uuid(pk, 'exam result id'),
            serializer.validated_data,
        )
        return Response(ExamResultSerializer(exam_result).data)

    def destroy(self, request, pk=None):
        services.delete_exam_result(request.user, parse_uuid(pk, 'exam result id'))
        return Response(status=status.HTTP_204_NO_CONTENT)
