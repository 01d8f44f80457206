import pytest
from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.utils import timezone

from apps.managers.models import ManagerLogin
from apps.analytics.analytics import AnalyticsQueries, haversine_km
from apps.analytics.exceptions import InvalidEventsError
from apps.analytics.models import (
    AdminAudit,
    EventCtaClick,
    EventFilterUsage,
    EventHomepageTile,
    EventPageView,
    EventSearch,
)
from apps.analytics.services import (
    find_duplicate_filter_usage,
    find_duplicate_page_views,
    ingest_events,
    record_audit,
)


def _last_30_days():
    end = timezone.now()
    return end - timedelta(days=30), end


# =============================================================================
# Ingestion
# =============================================================================

@pytest.mark.django_db
class TestIngestEvents:

    def test_rejects_non_list(self):
        with pytest.raises(InvalidEventsError, match='Events must be an array'):
            ingest_events(events={'type': 'page_view'})

    def test_stores_each_event_type(self, island_queen):
        processed = ingest_events(events=[
            {'type': 'page_view', 'data': {
                'session_id': 's1', 'pub_id': str(island_queen.id), 'device': 'mobile',
                'ref': 'google', 'utm': {'source': 'newsletter'},
            }},
            {'type': 'page_view', 'data': {'session_id': 's1', 'area_slug': 'islington'}},
            {'type': 'search', 'data': {'session_id': 's1', 'query': 'beer garden', 'results_count': '12'}},
            {'type': 'filter_usage', 'data': {'session_id': 's1', 'filter_key': 'sunday-roast'}},
            {'type': 'cta_click', 'data': {'session_id': 's1', 'pub_id': island_queen.place_id, 'type': 'book'}},
            {'type': 'cta_click', 'data': {'session_id': 's1', 'type': 'spin'}},
            {'type': 'homepage_tile', 'data': {'type': 'impression', 'slot_id': 'slot-1', 'title': 'Roasts'}},
        ])

        assert processed == 7
        view = EventPageView.objects.get(pub=island_queen)
        assert view.device == 'mobile'
        assert view.utm == {'source': 'newsletter'}
        assert EventPageView.objects.filter(area_slug='islington', pub__isnull=True).count() == 1
        assert EventSearch.objects.get().results_count == 12
        assert EventFilterUsage.objects.get().filter_key == 'sunday-roast'
        assert EventCtaClick.objects.get(type='book').pub == island_queen
        assert EventCtaClick.objects.get(type='spin').pub is None
        assert EventHomepageTile.objects.get().slot_id == 'slot-1'

    def test_skips_unknown_and_malformed_events(self, island_queen):
        processed = ingest_events(events=[
            {'type': 'page_view', 'data': {'session_id': 's1', 'pub_id': str(island_queen.id)}},
            {'type': 'mystery', 'data': {}},
            'not-an-event',
            {'type': 'search', 'data': {'query': ''}},
            {'type': 'cta_click', 'data': {'type': 'book'}},
            {'type': 'cta_click', 'data': {'type': 'teleport', 'pub_id': str(island_queen.id)}},
        ])

        # every received event counts as processed
        assert processed == 6
        assert EventPageView.objects.count() == 1
        assert EventSearch.objects.count() == 0
        assert EventCtaClick.objects.count() == 0

    def test_attaches_authenticated_user(self, site_user, island_queen):
        ingest_events(
            events=[{'type': 'page_view', 'data': {'session_id': 's1', 'pub_id': str(island_queen.id)}}],
            user=site_user,
        )
        assert EventPageView.objects.get().user == site_user

    def test_unknown_pub_is_not_linked(self):
        ingest_events(events=[{'type': 'page_view', 'data': {'session_id': 's1', 'pub_id': 'ChIJnowhere'}}])
        assert EventPageView.objects.get().pub is None


@pytest.mark.django_db
class TestRecordAudit:

    def test_stores_entity_id_as_text(self, island_queen):
        entry = record_audit(
            actor='admin@pubclub.co.uk',
            action='update_pub',
            entity='pub',
            entity_id=island_queen.id,
            diff={'name': ['Old', 'New']},
        )

        entry.refresh_from_db()
        assert entry.entity_id == str(island_queen.id)
        assert entry.diff == {'name': ['Old', 'New']}
        assert AdminAudit.objects.count() == 1


# =============================================================================
# Queries
# =============================================================================

def test_haversine_km():
    # London to Brighton is roughly 76km as the crow flies
    assert 70 < haversine_km(51.5074, -0.1278, 50.8225, -0.1372) < 80
    assert haversine_km(51.5, -0.1, 51.5, -0.1) == 0


@pytest.mark.django_db
class TestPubAnalytics:

    def test_overview_and_breakdowns(self, island_queen, site_user, make_page_views):
        make_page_views(island_queen, 2, device='mobile', ref='google', user=site_user)
        make_page_views(island_queen, 1, session_id='repeat')
        make_page_views(island_queen, 1, session_id='repeat')
        EventCtaClick.objects.create(pub=island_queen, type='book')

        start, end = _last_30_days()
        data = AnalyticsQueries.pub_analytics(pub_ids=[island_queen.id], start=start, end=end)

        overview = data['overview']
        assert overview['total_views'] == 4
        assert overview['unique_visitors'] == 3
        assert overview['unique_users'] == 1
        assert overview['avg_views_per_day'] == round(4 / 30, 2)
        assert overview['total_cta_clicks'] == 1
        assert overview['cta_click_rate'] == 25.0

        assert len(data['popular_times']) == 24
        assert sum(bucket['views'] for bucket in data['popular_times']) == 4
        assert {'device': 'mobile', 'count': 2} in data['device_breakdown']
        assert {'device': 'unknown', 'count': 2} in data['device_breakdown']
        assert {'source': 'google', 'count': 2} in data['referral_sources']
        assert {'source': 'direct', 'count': 2} in data['referral_sources']
        assert data['cta_breakdown'] == [{'type': 'book', 'count': 1}]
        assert sum(day['views'] for day in data['views_over_time']) == 4

    def test_excludes_other_pubs_and_old_events(self, island_queen, charles_lamb, make_page_views):
        make_page_views(island_queen, 1)
        make_page_views(island_queen, 3, ts=timezone.now() - timedelta(days=60))
        make_page_views(charles_lamb, 5)

        start, end = _last_30_days()
        data = AnalyticsQueries.pub_analytics(pub_ids=[island_queen.id], start=start, end=end)

        assert data['overview']['total_views'] == 1

    def test_no_views(self, island_queen):
        start, end = _last_30_days()
        data = AnalyticsQueries.pub_analytics(pub_ids=[island_queen.id], start=start, end=end)

        assert data['overview']['total_views'] == 0
        assert data['overview']['cta_click_rate'] == 0
        assert data['views_over_time'] == []


@pytest.mark.django_db
class TestPubBenchmark:

    def test_ranks_against_all_and_nearby(
        self, island_queen, narrow_boat, charles_lamb, brighton_pub, make_page_views
    ):
        make_page_views(island_queen, 10)
        make_page_views(narrow_boat, 5)
        make_page_views(brighton_pub, 20)

        start, end = _last_30_days()
        data = AnalyticsQueries.pub_benchmark(pub=island_queen, start=start, end=end, radius_km=5)

        assert data['pub']['views'] == 10
        assert data['pub']['rating'] == 4.5

        all_pubs = data['all_pubs']
        assert all_pubs['total'] == 4
        assert all_pubs['avg_views'] == 8.75
        assert all_pubs['median_views'] == 10
        assert all_pubs['rank'] == 3
        assert all_pubs['percentile'] == 50.0

        nearby = data['nearby_pubs']
        assert nearby['total'] == 2
        assert nearby['radius'] == 5
        assert nearby['rank'] == 3
        assert nearby['percentile'] == 100.0
        assert nearby['avg_rating'] == 4.3
        assert [pub['name'] for pub in nearby['pubs']] == ['The Charles Lamb', 'The Narrow Boat']
        assert all(pub['distance'] < 0.5 for pub in nearby['pubs'])

    def test_no_neighbours_falls_back_to_global(self, island_queen, brighton_pub):
        start, end = _last_30_days()
        data = AnalyticsQueries.pub_benchmark(pub=brighton_pub, start=start, end=end, radius_km=5)

        nearby = data['nearby_pubs']
        assert nearby['total'] == 0
        assert nearby['percentile'] == 50
        assert nearby['avg_rating'] == data['all_pubs']['avg_rating']
        assert nearby['pubs'] == []


@pytest.mark.django_db
class TestAdminOverview:

    def test_totals(self, island_queen, charles_lamb, manager, make_page_views):
        make_page_views(island_queen, 3)
        make_page_views(charles_lamb, 1)
        EventSearch.objects.create(query='roast')
        EventFilterUsage.objects.bulk_create([
            EventFilterUsage(filter_key='beer-garden'),
            EventFilterUsage(filter_key='beer-garden'),
            EventFilterUsage(filter_key='live-music'),
        ])
        ManagerLogin.objects.create(manager=manager, pub=island_queen, email=manager.email)
        ManagerLogin.objects.create(manager=manager, pub=island_queen, email=manager.email)

        start, end = _last_30_days()
        data = AnalyticsQueries.admin_overview(start=start, end=end)

        assert data['total_views'] == 4
        assert data['total_searches'] == 1
        assert data['unique_pubs_viewed'] == 2
        assert data['active_managers'] == 1
        assert data['filters_top'] == [
            {'key': 'beer-garden', 'uses': 2},
            {'key': 'live-music', 'uses': 1},
        ]
        assert len(data['views_by_day']) in (30, 31)
        assert sum(day['views'] for day in data['views_by_day']) == 4
        assert sum(day['searches'] for day in data['searches_by_day']) == 1
        assert data['high_potential_pubs'] == []

    def test_old_manager_logins_are_inactive(self, island_queen, manager):
        login = ManagerLogin.objects.create(manager=manager, pub=island_queen, email=manager.email)
        ManagerLogin.objects.filter(id=login.id).update(created_at=timezone.now() - timedelta(days=120))

        start, end = _last_30_days()
        assert AnalyticsQueries.admin_overview(start=start, end=end)['active_managers'] == 0

    def test_high_potential_pubs(self, island_queen, charles_lamb, make_page_views):
        make_page_views(island_queen, 500)
        make_page_views(charles_lamb, 499)

        start, end = _last_30_days()
        data = AnalyticsQueries.admin_overview(start=start, end=end)

        assert data['high_potential_pubs'] == [
            {'id': str(island_queen.id), 'name': 'The Island Queen', 'views': 500},
        ]

    def test_spin_and_tile_metrics(self, island_queen):
        EventCtaClick.objects.bulk_create(
            [EventCtaClick(type='spin') for _ in range(4)] + [EventCtaClick(type='spin_view_pub', pub=island_queen)]
        )
        EventHomepageTile.objects.bulk_create(
            [EventHomepageTile(type='impression', slot_id='a', title='Roasts') for _ in range(3)] +
            [EventHomepageTile(type='click', slot_id='a', title='Roasts')]
        )

        start, end = _last_30_days()
        data = AnalyticsQueries.admin_overview(start=start, end=end)

        assert data['spin_the_wheel'] == {
            'total_spins': 4,
            'total_view_pub_clicks': 1,
            'conversion_rate': 25.0,
        }
        tiles = data['homepage_tiles']
        assert tiles['impressions'] == 3
        assert tiles['clicks'] == 1
        assert tiles['click_through_rate'] == 33.33
        assert tiles['top_tiles'] == [{'slot_id': 'a', 'title': 'Roasts', 'clicks': 1}]


@pytest.mark.django_db
class TestSlotEngagement:

    def test_collects_tile_area_and_booking_signals(self, island_queen, make_page_views):
        EventHomepageTile.objects.bulk_create([
            EventHomepageTile(type='impression', slot_id='slot-1'),
            EventHomepageTile(type='impression', slot_id='slot-1'),
            EventHomepageTile(type='click', slot_id='slot-1'),
        ])
        make_page_views(None, 2, area_slug='islington')
        EventCtaClick.objects.create(pub=island_queen, type='book')
        EventCtaClick.objects.create(pub=island_queen, type='call')

        data = AnalyticsQueries.slot_engagement(since=timezone.now() - timedelta(days=7))

        assert data['tiles'] == {'slot-1': {'impressions': 2, 'clicks': 1}}
        assert data['area_views'] == {'islington': 2}
        assert data['area_bookings'] == {'islington': 1}


# =============================================================================
# Duplicate cleanup
# =============================================================================

@pytest.mark.django_db
class TestDuplicateCleanup:

    def test_page_views_keep_oldest_per_session_and_pub(self, island_queen, narrow_boat):
        now = timezone.now()
        oldest = EventPageView.objects.create(session_id='s1', pub=island_queen, ts=now - timedelta(minutes=5))
        repeat = EventPageView.objects.create(session_id='s1', pub=island_queen, ts=now)
        other_pub = EventPageView.objects.create(session_id='s1', pub=narrow_boat, ts=now)
        area = EventPageView.objects.create(session_id='s1', area_slug='islington', ts=now)
        EventPageView.objects.create(session_id='s1', area_slug='islington', ts=now)

        assert find_duplicate_page_views() == [repeat.id]

        out = StringIO()
        call_command('cleanup_pageview_duplicates', stdout=out)

        remaining = set(EventPageView.objects.values_list('id', flat=True))
        assert {oldest.id, other_pub.id, area.id} <= remaining
        assert repeat.id not in remaining
        assert 'Deleted 1' in out.getvalue()

    def test_filter_usage_within_one_second(self):
        now = timezone.now()
        first = EventFilterUsage.objects.create(session_id='s1', filter_key='beer-garden', ts=now)
        double_fire = EventFilterUsage.objects.create(
            session_id='s1', filter_key='beer-garden', ts=now + timedelta(milliseconds=300)
        )
        later = EventFilterUsage.objects.create(session_id='s1', filter_key='beer-garden', ts=now + timedelta(seconds=5))
        EventFilterUsage.objects.create(session_id='s2', filter_key='beer-garden', ts=now)

        assert find_duplicate_filter_usage() == [double_fire.id]

        call_command('cleanup_filter_duplicates', stdout=StringIO())

        remaining = set(EventFilterUsage.objects.values_list('id', flat=True))
        assert first.id in remaining
        assert later.id in remaining
        assert double_fire.id not in remaining
        assert len(remaining) == 3

    def test_dry_run_deletes_nothing(self, island_queen):
        EventPageView.objects.create(session_id='s1', pub=island_queen)
        EventPageView.objects.create(session_id='s1', pub=island_queen)

        out = StringIO()
        call_command('cleanup_pageview_duplicates', '--dry-run', stdout=out)

        assert EventPageView.objects.count() == 2
        assert 'Would delete 1' in out.getvalue()
