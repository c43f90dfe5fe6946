from django.contrib import admin
from .models import File


@admin.register(File)
class FileAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'subtype', 'size_bytes', 'created_at']
    search_fields = ['name', 'file']
    readonly_fields = ['id', 'file', 'created_at']
