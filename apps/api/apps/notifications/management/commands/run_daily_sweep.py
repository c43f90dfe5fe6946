"""
Management command to run the daily consultation sweeps once.

Usage:
    python manage.py run_daily_sweep
    python manage.py run_daily_sweep --date 2026-03-01

Fallback for deployments without Celery beat (e.g. a system cron entry).
"""
from datetime import datetime

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.notifications.sweeps import run_daily_sweep


class Command(BaseCommand):
    help = 'Dispatch confirmation reminders and auto-cancellations for the upcoming windows'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            help='Run as if today were this date (YYYY-MM-DD)',
        )

    def handle(self, *args, **options):
        now = timezone.now()
        if options['date']:
            day = parse_date(options['date'])
            if day is None:
                raise CommandError(f"Invalid date: {options['date']}")
            now = timezone.make_aware(datetime.combine(day, datetime.min.time()))

        for result in run_daily_sweep(now):
            self.stdout.write(
                f'{result.sweep}: {len(result.consultation_ids)} consultation(s) '
                f'between {result.window_start:%Y-%m-%d %H:%M} and {result.window_end:%Y-%m-%d %H:%M}'
                f'{" (dispatched)" if result.dispatched else ""}'
            )
        self.stdout.write(self.style.SUCCESS('Daily sweep finished'))
