"""
Import pubs from a CSV export.

Usage:
    python manage.py import_pubs pubs.csv
    python manage.py import_pubs pubs.csv --dry-run
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from apps.pubs.services import import_pubs_from_csv


class Command(BaseCommand):
    help = 'Import or update pubs from a CSV file (upserts by place_id)'

    def add_arguments(self, parser):
        parser.add_argument('csv_path', help='Path to the CSV file')
        parser.add_argument(
            '--city',
            default='London',
            help='City the imported pubs belong to',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Validate and report without writing to the database',
        )

    def handle(self, *args, **options):
        path = Path(options['csv_path'])
        if not path.exists():
            raise CommandError(f'File not found: {path}')

        report = import_pubs_from_csv(
            csv_text=path.read_text(encoding='utf-8'),
            city_name=options['city'],
            dry_run=options['dry_run'],
        )

        for error in report.errors:
            self.stdout.write(self.style.ERROR(f'  {error}'))
        for duplicate in report.duplicates:
            self.stdout.write(self.style.WARNING(
                f"  Row {duplicate['row']}: '{duplicate['name']}' looks like "
                f"'{duplicate['existing_name']}' ({duplicate['similarity']}%)"
            ))

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('--dry-run mode: No changes made.'))

        self.stdout.write(self.style.SUCCESS(
            f'Created {report.created}, updated {report.updated}, skipped {report.skipped}'
        ))
