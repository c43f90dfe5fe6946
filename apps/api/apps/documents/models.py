"""
Documents models: file
"""
import uuid
from django.db import models


class File(models.Model):
    """
    Blob-backed attachment (avatar, medicine leaflet, exam report).

    - file: object key in the files bucket
    - name: original client filename
    - type/subtype: the two halves of the MIME type
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    file = models.CharField(max_length=512, unique=True, help_text='Object key in MinIO')
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=60)
    subtype = models.CharField(max_length=120)
    size_bytes = models.BigIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'file'
        verbose_name = 'File'
        verbose_name_plural = 'Files'

    def __str__(self):
        return self.name

    @property
    def content_type(self):
        return f'{self.type}/{self.subtype}'
