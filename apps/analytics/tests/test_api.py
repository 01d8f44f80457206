import pytest
from django.urls import reverse
from rest_framework import status

from apps.analytics.models import EventPageView, EventSearch
from apps.analytics.services import record_audit


# =============================================================================
# Event ingestion
# =============================================================================

@pytest.mark.django_db
class TestTrackEvents:
    """Tests for POST /api/events/"""

    def test_anonymous_batch(self, api_client, island_queen):
        url = reverse('analytics:events')
        response = api_client.post(url, {'events': [
            {'type': 'page_view', 'data': {'session_id': 'abc', 'pub_id': str(island_queen.id)}},
            {'type': 'search', 'data': {'session_id': 'abc', 'query': 'roast'}},
        ]}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'success': True, 'processed': 2}
        assert EventPageView.objects.get().pub == island_queen
        assert EventSearch.objects.get().user is None

    def test_logged_in_user_attached(self, user_client, site_user, island_queen):
        url = reverse('analytics:events')
        user_client.post(url, {'events': [
            {'type': 'page_view', 'data': {'session_id': 'abc', 'pub_id': str(island_queen.id)}},
        ]}, format='json')

        assert EventPageView.objects.get().user == site_user

    @pytest.mark.parametrize('payload', [{}, {'events': 'page_view'}, {'events': {'type': 'search'}}])
    def test_events_must_be_a_list(self, api_client, payload):
        url = reverse('analytics:events')
        response = api_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Events must be an array'


# =============================================================================
# Pub manager dashboard
# =============================================================================

@pytest.mark.django_db
class TestPubAnalytics:
    """Tests for GET /api/pub-manager/analytics/"""

    def test_requires_manager_token(self, api_client):
        url = reverse('analytics:pub-analytics')
        response = api_client.get(url)

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    def test_site_user_rejected(self, user_client):
        url = reverse('analytics:pub-analytics')
        response = user_client.get(url)

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    def test_defaults_to_token_pub(self, manager_client, island_queen, narrow_boat, make_page_views):
        make_page_views(island_queen, 3)
        make_page_views(narrow_boat, 2)

        url = reverse('analytics:pub-analytics')
        response = manager_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['overview']['total_views'] == 3
        assert len(response.data['popular_times']) == 24
        assert set(response.data['date_range']) == {'from', 'to'}

    def test_all_managed_pubs(self, manager_client, island_queen, narrow_boat, charles_lamb, make_page_views):
        make_page_views(island_queen, 3)
        make_page_views(narrow_boat, 2)
        make_page_views(charles_lamb, 7)

        url = reverse('analytics:pub-analytics')
        response = manager_client.get(url, {'pub_id': 'all'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['overview']['total_views'] == 5

    def test_linked_pub(self, manager_client, narrow_boat, make_page_views):
        make_page_views(narrow_boat, 2)

        url = reverse('analytics:pub-analytics')
        response = manager_client.get(url, {'pub_id': str(narrow_boat.id), 'period': 7})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['overview']['total_views'] == 2

    def test_unmanaged_pub_forbidden(self, manager_client, charles_lamb):
        url = reverse('analytics:pub-analytics')
        response = manager_client.get(url, {'pub_id': str(charles_lamb.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_invalid_dates(self, manager_client):
        url = reverse('analytics:pub-analytics')
        response = manager_client.get(url, {'from': '2026-05-10', 'to': '2026-05-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestPubBenchmark:
    """Tests for GET /api/pub-manager/benchmark/"""

    def test_benchmark_token_pub(self, manager_client, island_queen, charles_lamb, brighton_pub, make_page_views):
        make_page_views(island_queen, 4)
        make_page_views(charles_lamb, 2)

        url = reverse('analytics:pub-benchmark')
        response = manager_client.get(url, {'radius': 2})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['pub']['views'] == 4
        assert response.data['all_pubs']['total'] == 4
        nearby = response.data['nearby_pubs']
        assert nearby['radius'] == 2
        assert 'The Cricketers' not in [pub['name'] for pub in nearby['pubs']]

    def test_unmanaged_pub_forbidden(self, manager_client, charles_lamb):
        url = reverse('analytics:pub-benchmark')
        response = manager_client.get(url, {'pub_id': str(charles_lamb.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Admin
# =============================================================================

@pytest.mark.django_db
class TestAdminOverview:
    """Tests for GET /api/admin/analytics/overview/"""

    def test_admin_only(self, user_client):
        url = reverse('analytics:admin-overview')
        response = user_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_overview(self, admin_client, island_queen, make_page_views):
        make_page_views(island_queen, 2)

        url = reverse('analytics:admin-overview')
        response = admin_client.get(url, {'period': 7})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_views'] == 2
        assert response.data['unique_pubs_viewed'] == 1
        assert len(response.data['views_by_day']) == 8
        assert response.data['spin_the_wheel']['conversion_rate'] == 0.0


@pytest.mark.django_db
class TestAdminAuditLog:
    """Tests for GET /api/admin/audit/"""

    def test_admin_only(self, user_client):
        url = reverse('analytics:admin-audit-list')
        response = user_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_paged_newest_first(self, admin_client, island_queen):
        for action in ('import_pubs', 'update_pub', 'delete_pub'):
            record_audit(actor='admin@pubclub.co.uk', action=action, entity='pub', entity_id=island_queen.id)

        url = reverse('analytics:admin-audit-list')
        response = admin_client.get(url, {'page_size': 2})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3
        assert len(response.data['results']) == 2
        assert response.data['next'] is not None

    def test_filter_by_action(self, admin_client, island_queen):
        record_audit(actor='admin@pubclub.co.uk', action='update_pub', entity='pub', entity_id=island_queen.id)
        record_audit(actor='landlord@islandqueen.co.uk', action='update', entity='pub', entity_id=island_queen.id)

        url = reverse('analytics:admin-audit-list')
        response = admin_client.get(url, {'action': 'update'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['actor'] == 'landlord@islandqueen.co.uk'
        assert response.data['results'][0]['entity_id'] == str(island_queen.id)
