"""
Catalog viewsets.

Administrators write every catalog. Specialties are read by patients and
administrators; the other catalogs by any authenticated user, since doctors
pick conditions, surgeries, medicines and exams while writing records.
"""
from rest_framework import viewsets
from rest_framework.permissions import SAFE_METHODS

from apps.authz.permissions import IsAdministrator, IsPatientOrAdministrator, ReadAnyWriteAdministrator
from apps.catalog.models import Condition, Exam, Medicine, Specialty, Surgery
from apps.catalog.serializers import (
    ConditionSerializer,
    ExamSerializer,
    MedicineSerializer,
    SpecialtySerializer,
    SurgerySerializer,
)


class SpecialtyViewSet(viewsets.ModelViewSet):
    queryset = Specialty.objects.all()
    serializer_class = SpecialtySerializer

    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [IsPatientOrAdministrator()]
        return [IsAdministrator()]


class MedicineViewSet(viewsets.ModelViewSet):
    queryset = Medicine.objects.all()
    serializer_class = MedicineSerializer
    permission_classes = [ReadAnyWriteAdministrator]


class ExamViewSet(viewsets.ModelViewSet):
    queryset = Exam.objects.all()
    serializer_class = ExamSerializer
    permission_classes = [ReadAnyWriteAdministrator]


class ConditionViewSet(viewsets.ModelViewSet):
    queryset = Condition.objects.select_related('specialty')
    serializer_class = ConditionSerializer
    permission_classes = [ReadAnyWriteAdministrator]


class SurgeryViewSet(viewsets.ModelViewSet):
    queryset = Surgery.objects.select_related('specialty')
    serializer_class = SurgerySerializer
    permission_classes = [ReadAnyWriteAdministrator]
