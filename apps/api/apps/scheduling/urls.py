"""
Scheduling URLs - timetables, consultations, confirmations and schedules
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    ConsultationConfirmationView,
    ConsultationViewSet,
    DoctorConsultationListView,
    PatientConsultationListView,
    ScheduleView,
    TimetableViewSet,
)

router = DefaultRouter()
router.register(r'timetables', TimetableViewSet, basename='timetable')
router.register(r'consultations', ConsultationViewSet, basename='consultation')
router.register(r'patient/consultations', PatientConsultationListView, basename='patient-consultation')
router.register(r'doctor/consultations', DoctorConsultationListView, basename='doctor-consultation')

urlpatterns = [
    path(
        'confirmations/consultation/<uuid:pk>/',
        ConsultationConfirmationView.as_view(),
        name='consultation-confirm'
    ),
    path('schedules/', ScheduleView.as_view(), name='schedules'),
    path('', include(router.urls)),
]
