from django.contrib import admin
from .models import Diagnostic, ExamRequest, ExamResult, Prescription, Referral


class PrescriptionInline(admin.TabularInline):
    model = Prescription
    extra = 0
    readonly_fields = ['issued_on']


@admin.register(Diagnostic)
class DiagnosticAdmin(admin.ModelAdmin):
    list_display = ['consultation', 'condition', 'surgery', 'operation_date', 'created_at']
    list_filter = ['condition']
    raw_id_fields = ['consultation']
    inlines = [PrescriptionInline]


@admin.register(Referral)
class ReferralAdmin(admin.ModelAdmin):
    list_display = ['consultation', 'specialty', 'date']
    raw_id_fields = ['consultation']


@admin.register(ExamRequest)
class ExamRequestAdmin(admin.ModelAdmin):
    list_display = ['consultation', 'exam', 'date']
    list_filter = ['exam']
    raw_id_fields = ['consultation']


@admin.register(ExamResult)
class ExamResultAdmin(admin.ModelAdmin):
    list_display = ['exam_request', 'date', 'report']
    raw_id_fields = ['exam_request', 'report']
