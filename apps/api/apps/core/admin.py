from django.contrib import admin
from .models import Address, Clinic, ClinicSpecialty


class AddressInline(admin.StackedInline):
    model = Address
    extra = 0


@admin.register(Clinic)
class ClinicAdmin(admin.ModelAdmin):
    list_display = ['name', 'cnpj', 'phone', 'owner', 'created_at']
    search_fields = ['name', 'cnpj']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [AddressInline]


admin.site.register(ClinicSpecialty)
