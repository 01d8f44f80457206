"""
Management command to seed the homepage with the fallback slots.

Deletes every stored slot first.

Usage:
    python manage.py seed_homepage_slots
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from apps.homepage.models import HomepageSlot
from apps.homepage.services import FALLBACK_SLOTS


class Command(BaseCommand):
    help = 'Replace all homepage slots with the default six'

    def handle(self, *args, **options):
        with transaction.atomic():
            deleted, _ = HomepageSlot.objects.all().delete()
            slots = HomepageSlot.objects.bulk_create([
                HomepageSlot(**fields, position=position, is_active=True)
                for position, fields in enumerate(FALLBACK_SLOTS, start=1)
            ])

        self.stdout.write(f'Cleared {deleted} existing slots.')
        for slot in slots:
            self.stdout.write(f'{slot.position}. {slot.title} ({slot.pub_count} pubs, score: {slot.score})')
        self.stdout.write(self.style.SUCCESS(f'Created {len(slots)} homepage slots.'))
