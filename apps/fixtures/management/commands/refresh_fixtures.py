"""
Management command to refresh televised fixtures from TheSportsDB.

Same work as the refresh-fixtures cron endpoint, for running by hand.

Usage:
    python manage.py refresh_fixtures [--clear]
"""

from django.core.management.base import BaseCommand, CommandError
from apps.fixtures.services import refresh_fixtures, clear_fixtures, SportsDbNotConfiguredError


class Command(BaseCommand):
    help = 'Replace stored fixtures with the next 14 days of UK televised sport'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Only delete stored fixtures',
        )

    def handle(self, *args, **options):
        if options['clear']:
            count = clear_fixtures()
            self.stdout.write(self.style.SUCCESS(f'Cleared {count} fixtures.'))
            return

        try:
            count = refresh_fixtures()
        except SportsDbNotConfiguredError as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(f'Stored {count} fixtures.'))
