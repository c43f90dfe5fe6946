"""
Management command to create the fixed roles.

Usage:
    python manage.py seed_roles

Idempotent: existing roles are left untouched.
"""
from django.core.management.base import BaseCommand

from apps.authz.models import Role, RoleChoices


ROLE_DESCRIPTIONS = {
    RoleChoices.ADMINISTRATOR: 'Manages clinics, catalogs, roles and timetables',
    RoleChoices.DOCTOR: 'Owns timetable slots and writes clinical records',
    RoleChoices.PATIENT: 'Books, confirms and cancels own consultations',
    RoleChoices.ASSISTANT: 'Books and cancels consultations for patients of its clinic',
}


class Command(BaseCommand):
    help = 'Ensure the administrator, doctor, patient and assistant roles exist'

    def handle(self, *args, **options):
        for choice in RoleChoices:
            role, created = Role.objects.get_or_create(
                slug=choice.value,
                defaults={'name': choice.label, 'description': ROLE_DESCRIPTIONS[choice]}
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f'Created role: {role.slug}'))
            else:
                self.stdout.write(f'Role exists: {role.slug}')
