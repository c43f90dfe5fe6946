"""
Celery application for the clinic API.

Workers consume the notification jobs; beat fires the daily consultation
sweep from CELERY_BEAT_SCHEDULE.
"""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('clinic')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
