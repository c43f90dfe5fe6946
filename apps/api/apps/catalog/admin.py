from django.contrib import admin
from .models import Condition, Exam, Medicine, Specialty, Surgery


@admin.register(Specialty)
class SpecialtyAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = ['name', 'active_ingredient', 'created_at']
    search_fields = ['name', 'active_ingredient']


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Condition)
class ConditionAdmin(admin.ModelAdmin):
    list_display = ['name', 'specialty']
    list_filter = ['specialty']
    search_fields = ['name']


@admin.register(Surgery)
class SurgeryAdmin(admin.ModelAdmin):
    list_display = ['name', 'specialty']
    list_filter = ['specialty']
    search_fields = ['name']
