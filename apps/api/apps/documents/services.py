"""
File services: upload and removal keep rows and stored bytes together.
"""
import logging

from django.db import transaction
from minio.error import S3Error

from apps.documents import storage
from apps.documents.models import File

logger = logging.getLogger(__name__)


def create_file(uploaded) -> File:
    """Store an uploaded file and create its row."""
    content_type = uploaded.content_type or 'application/octet-stream'
    file_type, _, subtype = content_type.partition('/')
    key = storage.generate_object_key('files', uploaded.name)

    storage.store(uploaded.read(), key, content_type)
    try:
        file = File.objects.create(
            file=key,
            name=uploaded.name,
            type=file_type,
            subtype=subtype or 'octet-stream',
            size_bytes=uploaded.size,
        )
    except Exception:
        # No row will ever point at the object
        storage.delete(key)
        raise

    logger.info('File stored', extra={'file_id': str(file.id), 'size_bytes': uploaded.size})
    return file


def delete_file(file: File) -> None:
    """
    Delete the File row; its bytes are removed once the transaction commits.
    """
    key = file.file
    file_id = str(file.id)
    file.delete()

    def _remove_object():
        try:
            storage.delete(key)
        except S3Error:
            logger.exception('Stored object removal failed', extra={'file_id': file_id})

    transaction.on_commit(_remove_object)
    logger.info('File deleted', extra={'file_id': file_id})
