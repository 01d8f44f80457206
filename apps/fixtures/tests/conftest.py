import pytest
from datetime import timedelta
from unittest.mock import Mock
from django.utils import timezone
from rest_framework.test import APIClient
from apps.fixtures.models import UpcomingFixture


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def cron_client(settings):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {settings.CRON_SECRET}')
    return client


@pytest.fixture
def make_fixture(db):
    """Create a stored fixture starting ``hours`` from now."""
    def _make(name, hours=24, channel_name='Sky Sports', channel_slug='sky-sports', **fields):
        return UpcomingFixture.objects.create(
            external_id=f'{name}-{channel_name}-United Kingdom',
            event_id=fields.pop('event_id', name),
            name=name,
            starting_at=timezone.now() + timedelta(hours=hours),
            channel_name=channel_name,
            channel_slug=channel_slug,
            channel_link=f'/vibe/{channel_slug}' if channel_slug else '/vibe/terrestrial-tv',
            **fields,
        )
    return _make


def json_response(payload, status_code=200):
    """Fake requests.Response carrying a JSON body."""
    response = Mock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.text = 'json'
    response.json.return_value = payload
    return response


@pytest.fixture
def sportsdb_get():
    """
    Build a side effect for requests.get from a {path fragment: payload} map.

    Unmatched URLs answer with an empty body.
    """
    def _build(routes):
        def _get(url, headers=None, timeout=None):
            for fragment, payload in routes.items():
                if fragment in url:
                    return json_response(payload)
            empty = json_response(None)
            empty.text = ''
            return empty
        return _get
    return _build
