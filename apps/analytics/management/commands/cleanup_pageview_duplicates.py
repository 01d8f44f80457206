"""
Management command to remove repeated pub page views.

A session that views the same pub several times counts once: the oldest
view per (session, pub) is kept and the rest are deleted.

Usage:
    python manage.py cleanup_pageview_duplicates [--dry-run]
"""

from django.core.management.base import BaseCommand
from apps.analytics.models import EventPageView
from apps.analytics.services import find_duplicate_page_views, delete_events


class Command(BaseCommand):
    help = 'Delete duplicate page views (same session and pub), keeping the oldest'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without making changes',
        )

    def handle(self, *args, **options):
        duplicates = find_duplicate_page_views()

        if not duplicates:
            self.stdout.write(self.style.SUCCESS('No duplicate page views found.'))
            return

        if options['dry_run']:
            self.stdout.write(f'Would delete {len(duplicates)} duplicate page views.')
            return

        deleted = delete_events(model=EventPageView, ids=duplicates)
        self.stdout.write(self.style.SUCCESS(f'Deleted {deleted} duplicate page views.'))
