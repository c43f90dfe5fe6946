"""
Catalog models: specialty, medicine, exam, condition, surgery
"""
import uuid
from django.db import models


class Specialty(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150, unique=True)
    description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'specialty'
        verbose_name_plural = 'Specialties'
        ordering = ['name']

    def __str__(self):
        return self.name


class Medicine(models.Model):
    """Medicine that can be prescribed; ``leaflet`` is the package insert file."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    active_ingredient = models.CharField(max_length=255)
    contra_indications = models.TextField(blank=True, default='')
    leaflet = models.ForeignKey(
        'documents.File',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'medicine'
        ordering = ['name']

    def __str__(self):
        return self.name


class Exam(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'exam'
        ordering = ['name']

    def __str__(self):
        return self.name


class Condition(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default='')
    specialty = models.ForeignKey(Specialty, on_delete=models.PROTECT, related_name='conditions')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'condition'
        ordering = ['name']

    def __str__(self):
        return self.name


class Surgery(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default='')
    specialty = models.ForeignKey(Specialty, on_delete=models.PROTECT, related_name='surgeries')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'surgery'
        verbose_name_plural = 'Surgeries'
        ordering = ['name']

    def __str__(self):
        return self.name
