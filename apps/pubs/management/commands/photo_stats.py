"""
Report how many pubs have photo pointers.

Usage:
    python manage.py photo_stats
"""

from django.core.management.base import BaseCommand
from django.db.models import Q
from apps.pubs.models import Pub, PubPhoto


class Command(BaseCommand):
    help = 'Show photo coverage across pubs'

    def handle(self, *args, **options):
        total = Pub.objects.count()
        with_url = Pub.objects.exclude(photo_url='').count()
        with_name = Pub.objects.exclude(photo_name='').count()
        without_any = Pub.objects.filter(Q(photo_url='') & Q(photo_name='')).count()
        legacy = Pub.objects.filter(photo_url__contains='photo_reference').count()
        uploaded = PubPhoto.objects.values('pub').distinct().count()

        def percent(count):
            return f'{(count / total * 100):.1f}%' if total else '0.0%'

        self.stdout.write(f'Total pubs:                 {total}')
        self.stdout.write(f'With photo_url:             {with_url} ({percent(with_url)})')
        self.stdout.write(f'  of which legacy refs:     {legacy}')
        self.stdout.write(f'With photo_name:            {with_name} ({percent(with_name)})')
        self.stdout.write(f'With manager uploads:       {uploaded} ({percent(uploaded)})')

        if without_any:
            self.stdout.write(self.style.WARNING(f'Without any photo:          {without_any} ({percent(without_any)})'))
        else:
            self.stdout.write(self.style.SUCCESS('Every pub has a photo pointer'))
