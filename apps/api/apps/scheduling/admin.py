from django.contrib import admin
from .models import Consultation, TimetableSlot


@admin.register(TimetableSlot)
class TimetableSlotAdmin(admin.ModelAdmin):
    list_display = ['datetime', 'doctor', 'clinic', 'scheduled']
    list_filter = ['scheduled', 'clinic']
    search_fields = ['doctor__email']
    date_hierarchy = 'datetime'


@admin.register(Consultation)
class ConsultationAdmin(admin.ModelAdmin):
    list_display = ['datetime', 'doctor', 'patient', 'clinic', 'is_return', 'confirmed']
    list_filter = ['confirmed', 'is_return', 'clinic']
    search_fields = ['doctor__email', 'patient__email']
    date_hierarchy = 'datetime'
    raw_id_fields = ['doctor', 'patient', 'clinic']
