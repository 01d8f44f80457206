import pytest
from unittest.mock import patch
from django.urls import reverse
from rest_framework import status
from apps.fixtures.models import UpcomingFixture


# =============================================================================
# Cron
# =============================================================================

@pytest.mark.django_db
class TestCronRefreshFixtures:
    """Tests for GET|POST /api/cron/refresh-fixtures/"""

    def test_requires_secret(self, api_client):
        response = api_client.post(reverse('fixtures:cron-refresh'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_wrong_secret(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-the-secret')

        response = api_client.get(reverse('fixtures:cron-refresh'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_empty_secret_rejects_everything(self, api_client, settings):
        settings.CRON_SECRET = ''
        api_client.credentials(HTTP_AUTHORIZATION='Bearer ')

        response = api_client.get(reverse('fixtures:cron-refresh'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_api_key(self, cron_client, settings):
        settings.THE_SPORTS_DB_API_KEY = ''

        response = cron_client.post(reverse('fixtures:cron-refresh'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'THE_SPORTS_DB_API_KEY' in response.data['error']

    def test_refresh(self, cron_client):
        with patch('apps.fixtures.services.refresh_fixtures', return_value=7):
            response = cron_client.get(reverse('fixtures:cron-refresh'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Fixtures refreshed'
        assert response.data['count'] == 7
        assert 'timestamp' in response.data


@pytest.mark.django_db
class TestCronClearFixtures:
    """Tests for GET|POST /api/cron/clear-fixtures/"""

    def test_requires_secret(self, api_client, make_fixture):
        make_fixture('Derby')

        response = api_client.post(reverse('fixtures:cron-clear'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert UpcomingFixture.objects.count() == 1

    def test_clear(self, cron_client, make_fixture):
        make_fixture('Derby')
        make_fixture('Final')

        response = cron_client.post(reverse('fixtures:cron-clear'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Fixtures cleared'
        assert response.data['count'] == 2
        assert not UpcomingFixture.objects.exists()


# =============================================================================
# Public
# =============================================================================

@pytest.mark.django_db
class TestUpcoming:
    """Tests for GET /api/fixtures/upcoming/"""

    def test_lists_future_fixtures(self, api_client, make_fixture):
        make_fixture('Yesterday', hours=-24)
        make_fixture('Tonight', hours=6, league='Premier League')

        response = api_client.get(reverse('fixtures:upcoming'))

        assert response.status_code == status.HTTP_200_OK
        assert [f['name'] for f in response.data['fixtures']] == ['Tonight']
        assert response.data['fixtures'][0]['channel_link'] == '/vibe/sky-sports'

    def test_channel_filter(self, api_client, make_fixture):
        make_fixture('Sky Game')
        make_fixture('TNT Game', channel_name='TNT Sports', channel_slug='tnt-sports')

        response = api_client.get(reverse('fixtures:upcoming'), {'channel': 'tnt-sports'})

        assert [f['name'] for f in response.data['fixtures']] == ['TNT Game']


@pytest.mark.django_db
class TestLivescores:
    """Tests for GET /api/fixtures/livescores/"""

    def test_scores(self, api_client):
        scores = {'42': {'home_score': 1, 'away_score': 0, 'progress': 'HT'}}
        with patch('apps.fixtures.services.live_scores', return_value=scores):
            response = api_client.get(reverse('fixtures:livescores'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'scores': scores}
        assert response['Cache-Control'] == 'public, s-maxage=60, stale-while-revalidate=30'

    def test_no_key_is_empty(self, api_client, settings):
        settings.THE_SPORTS_DB_API_KEY = ''

        response = api_client.get(reverse('fixtures:livescores'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'scores': {}}
