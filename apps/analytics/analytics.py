"""
Analytics Module
=================

This module provides the read side of Pub Club analytics. It aggregates the
event tables (page views, searches, filter usage, CTA clicks and homepage
tile events) into the numbers shown on the pub-manager dashboard, the admin
overview and the homepage tile scorer.

Classes:
    AnalyticsQueries: Static methods for the analytics queries.

Functions:
    haversine_km: Great-circle distance between two coordinates.

Key Features:
    - Per-pub traffic, visitors, devices, referrers and CTA clicks
    - Benchmarking a pub against every pub and against its neighbours
    - Site-wide admin overview with spin-the-wheel and tile metrics
    - 7-day engagement signals for homepage tile scoring

Example:
    Getting a pub's last 30 days::

        from apps.analytics.analytics import AnalyticsQueries

        end = timezone.now()
        stats = AnalyticsQueries.pub_analytics(
            pub_ids=[pub.id],
            start=end - timedelta(days=30),
            end=end,
        )
        print(f"{stats['overview']['total_views']} views")

Note:
    This module is read-only and doesn't modify any data. All methods
    are static and can be called without instantiation. Day and hour
    buckets use the project time zone (Europe/London).
"""

import math
from collections import Counter
from datetime import timedelta

from django.db.models import Count
from django.utils import timezone

from apps.pubs.models import Pub
from apps.pubs.services.slugs import generate_slug
from .models import EventPageView, EventSearch, EventFilterUsage, EventCtaClick, EventHomepageTile, CtaType

EARTH_RADIUS_KM = 6371
HIGH_POTENTIAL_VIEWS = 500
ACTIVE_MANAGER_DAYS = 90
NEARBY_LIST_SIZE = 10


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2 +
        math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _round(value: float) -> float:
    return round(value, 2)


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0


def _breakdown(counter: Counter, label: str) -> list[dict]:
    return [{label: key, 'count': count} for key, count in counter.most_common()]


def _day_series(start, end, counts: Counter, label: str) -> list[dict]:
    """One entry per calendar day from start to end, zero-filled."""
    day = timezone.localtime(start).date()
    last = timezone.localtime(end).date()
    series = []
    while day <= last:
        key = day.isoformat()
        series.append({'date': key, label: counts.get(key, 0)})
        day += timedelta(days=1)
    return series


class AnalyticsQueries:
    """
    Aggregate queries for analytics endpoints.

    Methods:
        pub_analytics: Traffic and engagement for one or more pubs.
        pub_benchmark: Compare a pub with all pubs and its neighbours.
        admin_overview: Site-wide numbers for the admin dashboard.
        slot_engagement: Recent tile, area and booking signals per area.

    Note:
        All methods return plain dictionaries or lists, not Django objects,
        making them suitable for JSON serialization in API responses.
    """

    @staticmethod
    def pub_analytics(pub_ids, start, end):
        """
        Calculate traffic and engagement for a set of pubs.

        Page views and CTA clicks within [start, end] are loaded once and
        bucketed in Python; the volume per pub is small.

        Args:
            pub_ids: Pubs to include (a manager's pub or all of their pubs)
            start: Aware datetime, inclusive
            end: Aware datetime, inclusive

        Returns:
            dict: Analytics with keys:
                - overview (dict): total_views, unique_visitors (distinct
                  sessions), unique_users, avg_views_per_day,
                  total_cta_clicks, cta_click_rate (percent)
                - views_over_time (list): [{date, views}] for days with views
                - popular_times (list): 24 entries [{hour, views}]
                - device_breakdown (list): [{device, count}]
                - referral_sources (list): [{source, count}]
                - cta_breakdown (list): [{type, count}]
                - date_range (dict): from and to

        Example:
            >>> AnalyticsQueries.pub_analytics([pub.id], start, end)['overview']
            {'total_views': 120, 'unique_visitors': 87, ...}
        """
        views = list(
            EventPageView.objects
            .filter(pub_id__in=pub_ids, ts__gte=start, ts__lte=end)
            .values('ts', 'device', 'ref', 'session_id', 'user_id')
        )
        cta_types = list(
            EventCtaClick.objects
            .filter(pub_id__in=pub_ids, ts__gte=start, ts__lte=end)
            .values_list('type', flat=True)
        )

        total_views = len(views)
        days = max(1, math.ceil((end - start).total_seconds() / 86400))
        total_cta_clicks = len(cta_types)

        by_day = Counter()
        by_hour = Counter()
        for view in views:
            local = timezone.localtime(view['ts'])
            by_day[local.date().isoformat()] += 1
            by_hour[local.hour] += 1

        return {
            'overview': {
                'total_views': total_views,
                'unique_visitors': len({view['session_id'] for view in views}),
                'unique_users': len({view['user_id'] for view in views if view['user_id']}),
                'avg_views_per_day': _round(total_views / days),
                'total_cta_clicks': total_cta_clicks,
                'cta_click_rate': _round(total_cta_clicks / total_views * 100) if total_views else 0,
            },
            'views_over_time': [{'date': day, 'views': by_day[day]} for day in sorted(by_day)],
            'popular_times': [{'hour': hour, 'views': by_hour.get(hour, 0)} for hour in range(24)],
            'device_breakdown': _breakdown(Counter(view['device'] or 'unknown' for view in views), 'device'),
            'referral_sources': _breakdown(Counter(view['ref'] or 'direct' for view in views), 'source'),
            'cta_breakdown': _breakdown(Counter(cta_types), 'type'),
            'date_range': {'from': start.isoformat(), 'to': end.isoformat()},
        }

    @staticmethod
    def pub_benchmark(pub, start, end, radius_km=5.0):
        """
        Compare a pub's views and listing quality with other pubs.

        Only pubs with coordinates take part. Neighbours are pubs within
        ``radius_km`` (haversine). Nearby averages fall back to the global
        averages when there are no neighbours.

        Args:
            pub: The pub being benchmarked
            start: Aware datetime, inclusive
            end: Aware datetime, inclusive
            radius_km: Neighbourhood radius in kilometres

        Returns:
            dict: Benchmark with keys:
                - pub (dict): views, rating, review_count, amenity_count,
                  photo_count
                - all_pubs (dict): total, avg_views, median_views, rank,
                  percentile and averages of rating, reviews, amenities
                  and photos
                - nearby_pubs (dict): the same for neighbours plus radius
                  and the first 10 neighbours with their distance
        """
        view_counts = dict(
            EventPageView.objects
            .filter(pub__isnull=False, ts__gte=start, ts__lte=end)
            .values_list('pub_id')
            .annotate(views=Count('id'))
        )

        metrics = []
        located = (
            Pub.objects
            .filter(lat__isnull=False, lng__isnull=False)
            .annotate(
                amenity_count=Count('pub_amenities', distinct=True),
                photo_count=Count('photos', distinct=True),
            )
            .values('id', 'name', 'lat', 'lng', 'rating', 'review_count', 'amenity_count', 'photo_count')
        )
        for row in located:
            row['views'] = view_counts.get(row['id'], 0)
            row['rating'] = row['rating'] or 0
            row['review_count'] = row['review_count'] or 0
            metrics.append(row)

        pub_views = view_counts.get(pub.id, 0)
        views_sorted = sorted(row['views'] for row in metrics)
        rank_below = sum(1 for views in views_sorted if views < pub_views)

        nearby = []
        if pub.lat is not None and pub.lng is not None:
            for row in metrics:
                if row['id'] == pub.id:
                    continue
                distance = haversine_km(pub.lat, pub.lng, row['lat'], row['lng'])
                if distance <= radius_km:
                    nearby.append({**row, 'distance': distance})
            nearby.sort(key=lambda row: row['distance'])

        def averages(rows, fallback=None):
            if not rows and fallback is not None:
                return fallback
            return {
                'avg_rating': _round(_mean(row['rating'] for row in rows)),
                'avg_reviews': _round(_mean(row['review_count'] for row in rows)),
                'avg_amenities': _round(_mean(row['amenity_count'] for row in rows)),
                'avg_photos': _round(_mean(row['photo_count'] for row in rows)),
            }

        global_averages = averages(metrics)
        nearby_views = [row['views'] for row in nearby]
        nearby_below = sum(1 for views in nearby_views if views < pub_views)

        return {
            'pub': {
                'views': pub_views,
                'rating': pub.rating or 0,
                'review_count': pub.review_count or 0,
                'amenity_count': pub.pub_amenities.count(),
                'photo_count': pub.photos.count(),
            },
            'all_pubs': {
                'total': len(metrics),
                'avg_views': _round(_mean(views_sorted)),
                'median_views': views_sorted[len(views_sorted) // 2] if views_sorted else 0,
                'rank': rank_below + 1,
                'percentile': _round(rank_below / len(views_sorted) * 100) if views_sorted else 0,
                **global_averages,
            },
            'nearby_pubs': {
                'total': len(nearby),
                'radius': radius_km,
                'avg_views': _round(_mean(nearby_views)),
                'rank': nearby_below + 1,
                'percentile': _round(nearby_below / len(nearby_views) * 100) if nearby_views else 50,
                **averages(nearby, fallback=global_averages),
                'pubs': [
                    {
                        'id': str(row['id']),
                        'name': row['name'],
                        'views': row['views'],
                        'rating': row['rating'],
                        'distance': _round(row['distance']),
                    }
                    for row in nearby[:NEARBY_LIST_SIZE]
                ],
            },
        }

    @staticmethod
    def admin_overview(start, end):
        """
        Site-wide numbers for the admin dashboard.

        Args:
            start: Aware datetime, inclusive
            end: Aware datetime, inclusive

        Returns:
            dict: Overview with keys:
                - total_views, total_searches, unique_pubs_viewed (int)
                - active_managers (int): managers with a login in the
                  last 90 days
                - views_by_day, searches_by_day (list): zero-filled daily
                  series
                - filters_top (list): [{key, uses}], most used first
                - high_potential_pubs (list): up to 10 pubs with at least
                  500 views in the range
                - spin_the_wheel (dict): total_spins,
                  total_view_pub_clicks, conversion_rate (percent, 1dp)
                - homepage_tiles (dict): impressions, clicks,
                  click_through_rate (percent, 2dp), top_tiles
        """
        from apps.managers.models import ManagerLogin

        views = EventPageView.objects.filter(ts__gte=start, ts__lte=end)
        searches = EventSearch.objects.filter(ts__gte=start, ts__lte=end)

        views_by_day = Counter(timezone.localtime(ts).date().isoformat() for ts in views.values_list('ts', flat=True))
        searches_by_day = Counter(
            timezone.localtime(ts).date().isoformat() for ts in searches.values_list('ts', flat=True)
        )

        filters_top = [
            {'key': row['filter_key'], 'uses': row['uses']}
            for row in (
                EventFilterUsage.objects
                .filter(ts__gte=start, ts__lte=end)
                .values('filter_key')
                .annotate(uses=Count('id'))
                .order_by('-uses', 'filter_key')
            )
        ]

        per_pub = (
            views.filter(pub__isnull=False)
            .values('pub_id', 'pub__name')
            .annotate(views=Count('id'))
            .filter(views__gte=HIGH_POTENTIAL_VIEWS)
            .order_by('-views', 'pub__name')[:10]
        )
        high_potential = [
            {'id': str(row['pub_id']), 'name': row['pub__name'], 'views': row['views']}
            for row in per_pub
        ]

        active_since = timezone.now() - timedelta(days=ACTIVE_MANAGER_DAYS)
        active_managers = (
            ManagerLogin.objects
            .filter(created_at__gte=active_since, manager__isnull=False)
            .order_by().values('manager_id').distinct().count()
        )

        clicks = EventCtaClick.objects.filter(ts__gte=start, ts__lte=end)
        total_spins = clicks.filter(type=CtaType.SPIN).count()
        spin_views = clicks.filter(type=CtaType.SPIN_VIEW_PUB).count()

        tiles = EventHomepageTile.objects.filter(ts__gte=start, ts__lte=end)
        impressions = tiles.filter(type='impression').count()
        tile_clicks = tiles.filter(type='click')
        click_count = tile_clicks.count()
        top_tiles = [
            {'slot_id': row['slot_id'], 'title': row['title'] or 'Unknown', 'clicks': row['clicks']}
            for row in (
                tile_clicks.values('slot_id', 'title').annotate(clicks=Count('id')).order_by('-clicks')[:10]
            )
        ]

        return {
            'total_views': views.count(),
            'total_searches': searches.count(),
            'unique_pubs_viewed': views.filter(pub__isnull=False).values('pub_id').distinct().count(),
            'active_managers': active_managers,
            'filters_top': filters_top,
            'views_by_day': _day_series(start, end, views_by_day, 'views'),
            'searches_by_day': _day_series(start, end, searches_by_day, 'searches'),
            'high_potential_pubs': high_potential,
            'spin_the_wheel': {
                'total_spins': total_spins,
                'total_view_pub_clicks': spin_views,
                'conversion_rate': round(spin_views / total_spins * 100, 1) if total_spins else 0.0,
            },
            'homepage_tiles': {
                'impressions': impressions,
                'clicks': click_count,
                'click_through_rate': _round(click_count / impressions * 100) if impressions else 0.0,
                'top_tiles': top_tiles,
            },
        }

    @staticmethod
    def slot_engagement(since):
        """
        Engagement signals used to score homepage tiles.

        Args:
            since: Aware datetime; only events after it count

        Returns:
            dict: Signals with keys:
                - tiles (dict): slot_id -> {'impressions', 'clicks'}
                - area_views (dict): area slug -> page views
                - area_bookings (dict): area slug -> 'book' CTA clicks
        """
        tiles = {}
        for row in (
            EventHomepageTile.objects
            .filter(ts__gte=since)
            .values('slot_id', 'type')
            .annotate(count=Count('id'))
        ):
            stats = tiles.setdefault(row['slot_id'], {'impressions': 0, 'clicks': 0})
            key = 'impressions' if row['type'] == 'impression' else 'clicks'
            stats[key] += row['count']

        area_views = Counter()
        for row in (
            EventPageView.objects
            .filter(ts__gte=since)
            .exclude(area_slug='')
            .values('area_slug')
            .annotate(count=Count('id'))
        ):
            area_views[row['area_slug']] += row['count']

        area_bookings = Counter()
        for row in (
            EventCtaClick.objects
            .filter(ts__gte=since, type=CtaType.BOOK, pub__isnull=False)
            .values('pub__borough__name', 'pub__city__name')
            .annotate(count=Count('id'))
        ):
            area = row['pub__borough__name'] or row['pub__city__name']
            if area:
                area_bookings[generate_slug(area)] += row['count']

        return {
            'tiles': tiles,
            'area_views': dict(area_views),
            'area_bookings': dict(area_bookings),
        }
