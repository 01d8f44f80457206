"""
Check stored legacy photo references against Google Places.

Usage:
    python manage.py validate_photo_references
    python manage.py validate_photo_references --clear-invalid
"""

from django.core.management.base import BaseCommand, CommandError
from apps.pubs.models import Pub
from apps.pubs.services import PhotoFetchError
from apps.pubs.services.photo_proxy import check_photo_reference, extract_photo_reference


class Command(BaseCommand):
    help = 'Validate legacy photo references and optionally clear broken ones'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear-invalid',
            action='store_true',
            help='Blank photo_url on pubs whose reference no longer resolves',
        )
        parser.add_argument('--limit', type=int, default=None, help='Check at most this many pubs')

    def handle(self, *args, **options):
        pubs = Pub.objects.filter(photo_url__contains='photo_reference').order_by('name')
        if options['limit']:
            pubs = pubs[:options['limit']]

        valid, invalid = 0, []
        for pub in pubs:
            try:
                ok = check_photo_reference(reference=extract_photo_reference(pub.photo_url))
            except PhotoFetchError as e:
                raise CommandError(str(e))
            if ok:
                valid += 1
            else:
                invalid.append(pub)
                self.stdout.write(self.style.WARNING(f'  Invalid: {pub.name} ({pub.id})'))

        self.stdout.write(f'Valid: {valid}, invalid: {len(invalid)}')

        if invalid and options['clear_invalid']:
            cleared = Pub.objects.filter(id__in=[pub.id for pub in invalid]).update(photo_url='')
            self.stdout.write(self.style.SUCCESS(f'Cleared {cleared} photo reference(s)'))
