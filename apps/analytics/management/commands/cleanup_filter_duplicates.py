"""
Management command to remove filter usage events fired twice in a row.

Usage:
    python manage.py cleanup_filter_duplicates [--window 1] [--dry-run]
"""

from django.core.management.base import BaseCommand
from apps.analytics.models import EventFilterUsage
from apps.analytics.services import find_duplicate_filter_usage, delete_events


class Command(BaseCommand):
    help = 'Delete filter usage events repeated within a short window in one session'

    def add_arguments(self, parser):
        parser.add_argument(
            '--window',
            type=float,
            default=1.0,
            help='Seconds within which a repeat counts as a duplicate',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without making changes',
        )

    def handle(self, *args, **options):
        duplicates = find_duplicate_filter_usage(window_seconds=options['window'])

        if not duplicates:
            self.stdout.write(self.style.SUCCESS('No duplicate filter events found.'))
            return

        if options['dry_run']:
            self.stdout.write(f'Would delete {len(duplicates)} duplicate filter events.')
            return

        deleted = delete_events(model=EventFilterUsage, ids=duplicates)
        self.stdout.write(self.style.SUCCESS(f'Deleted {deleted} duplicate filter events.'))
