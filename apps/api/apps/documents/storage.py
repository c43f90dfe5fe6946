"""
MinIO storage for File bytes.
"""
import io
import uuid

from django.conf import settings
from minio import Minio


def get_minio_client():
    """Get configured MinIO client instance."""
    return Minio(
        settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_USE_SSL
    )


def generate_object_key(prefix: str, filename: str) -> str:
    """Unique object key like ``files/<12 hex>_<sanitized name>``."""
    unique_id = uuid.uuid4().hex[:12]
    safe_filename = "".join(c for c in filename if c.isalnum() or c in "._-")
    return f"{prefix}/{unique_id}_{safe_filename}"


def store(data: bytes, key: str, content_type: str = 'application/octet-stream') -> str:
    client = get_minio_client()
    bucket = settings.MINIO_FILES_BUCKET
    if not client.bucket_exists(bucket):
        client.make_bucket(bucket)
    client.put_object(
        bucket,
        key,
        io.BytesIO(data),
        length=len(data),
        content_type=content_type,
    )
    return key


def read(key: str) -> bytes:
    client = get_minio_client()
    response = client.get_object(settings.MINIO_FILES_BUCKET, key)
    try:
        return response.read()
    finally:
        response.close()
        response.release_conn()


def delete(key: str) -> None:
    """Hard delete of the stored object."""
    get_minio_client().remove_object(settings.MINIO_FILES_BUCKET, key)
