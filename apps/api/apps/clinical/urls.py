"""
Clinical URLs - Diagnostics, Prescriptions, Referrals, Exams
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    ConsultationExamsView,
    DiagnosticViewSet,
    ExamResultViewSet,
    PrescriptionViewSet,
    ReferralViewSet,
)

router = DefaultRouter()
router.register(r'diagnostics', DiagnosticViewSet, basename='diagnostic')
router.register(r'prescriptions', PrescriptionViewSet, basename='prescription')
router.register(r'referrals', ReferralViewSet, basename='referral')
router.register(r'exam/results', ExamResultViewSet, basename='exam-result')

urlpatterns = [
    path('consultation/<uuid:pk>/exams/', ConsultationExamsView.as_view(), name='consultation-exams'),
    path('', include(router.urls)),
]
