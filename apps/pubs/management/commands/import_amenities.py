"""
Replace pub amenities from a CSV grid.

The CSV has a place_id column and one TRUE/FALSE column per amenity label.

Usage:
    python manage.py import_amenities amenities.csv
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from apps.pubs.services import import_amenities_from_csv, PubImportError


class Command(BaseCommand):
    help = 'Replace pub amenities from a place_id x amenity CSV grid'

    def add_arguments(self, parser):
        parser.add_argument('csv_path', help='Path to the CSV file')

    def handle(self, *args, **options):
        path = Path(options['csv_path'])
        if not path.exists():
            raise CommandError(f'File not found: {path}')

        try:
            report = import_amenities_from_csv(csv_text=path.read_text(encoding='utf-8'))
        except PubImportError as e:
            raise CommandError(str(e))

        for place_id in report.unknown_place_ids:
            self.stdout.write(self.style.WARNING(f'  Unknown place_id: {place_id}'))

        self.stdout.write(f"Amenities: {', '.join(report.amenities)}")
        self.stdout.write(self.style.SUCCESS(
            f'Updated {report.updated_pubs} pubs ({report.links_created} amenity links), '
            f'skipped {report.skipped_pubs}'
        ))
