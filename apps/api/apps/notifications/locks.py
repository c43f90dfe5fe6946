"""
Per-job-key execution lock.

At most one notification job per key runs at a time across workers. The
lock is a cache entry added atomically (cache.add) and expires after
NOTIFICATION_JOB_LOCK_TIMEOUT seconds if a worker dies holding it. That
timeout is kept above CELERY_TASK_TIME_LIMIT so a running batch never
outlives its lock.
"""
import uuid
from contextlib import contextmanager

from django.conf import settings
from django.core.cache import cache


class JobBusy(Exception):
    """Another execution holds the lock for this job key."""

    def __init__(self, job_key):
        super().__init__(f'Job {job_key} is already running')
        self.job_key = job_key


def lock_key(job_key: str) -> str:
    return f'notifications:lock:{job_key}'


@contextmanager
def job_lock(job_key: str, timeout: int = None):
    key = lock_key(job_key)
    owner = uuid.uuid4().hex
    if not cache.add(key, owner, timeout or settings.NOTIFICATION_JOB_LOCK_TIMEOUT):
        raise JobBusy(job_key)
    try:
        yield
    finally:
        # Only release a lock we still own
        if cache.get(key) == owner:
            cache.delete(key)
