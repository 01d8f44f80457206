from django.core.management.base import BaseCommand
from apps.pubs.services import list_areas


class Command(BaseCommand):
    help = 'List areas with their pub counts'

    def add_arguments(self, parser):
        parser.add_argument('--min-pubs', type=int, default=1, help='Hide areas with fewer pubs')

    def handle(self, *args, **options):
        areas = list_areas(min_pubs=options['min_pubs'])
        for area in areas:
            marker = '' if area['is_indexable'] else ' (noindex)'
            self.stdout.write(f"{area['pub_count']:>5}  {area['name']}  /{area['slug']}{marker}")
        self.stdout.write(self.style.SUCCESS(f'{len(areas)} areas'))
