from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ConditionViewSet, ExamViewSet, MedicineViewSet, SpecialtyViewSet, SurgeryViewSet

router = DefaultRouter()
router.register(r'specialties', SpecialtyViewSet, basename='specialty')
router.register(r'medicines', MedicineViewSet, basename='medicine')
router.register(r'exams', ExamViewSet, basename='exam')
router.register(r'conditions', ConditionViewSet, basename='condition')
router.register(r'surgeries', SurgeryViewSet, basename='surgery')

urlpatterns = [
    path('', include(router.urls)),
]
