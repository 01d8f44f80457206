import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.pubs.models import City, Borough, Pub
from apps.managers.models import Manager, PubManager
from apps.managers.services import issue_token
from apps.analytics.models import EventPageView


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def site_user(db):
    return User.objects.create_user(
        email='regular@example.com',
        password='TestPass123!',
        display_name='Regular',
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@pubclub.co.uk',
        password='adminpass123',
        display_name='Admin',
        is_staff=True,
    )


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def user_client(site_user):
    client = APIClient()
    client.force_authenticate(user=site_user)
    return client


# =============================================================================
# Pubs
# =============================================================================

@pytest.fixture
def islington(db):
    london = City.objects.create(name='London')
    return Borough.objects.create(name='Islington', city=london)


@pytest.fixture
def island_queen(islington):
    return Pub.objects.create(
        name='The Island Queen',
        place_id='ChIJislandqueen',
        city=islington.city,
        borough=islington,
        lat=51.5345,
        lng=-0.0985,
        rating=4.5,
        review_count=200,
        manager_email='landlord@islandqueen.co.uk',
    )


@pytest.fixture
def narrow_boat(islington):
    """Managed alongside the Island Queen, about 300m away."""
    return Pub.objects.create(
        name='The Narrow Boat',
        place_id='ChIJnarrowboat',
        city=islington.city,
        borough=islington,
        lat=51.5353,
        lng=-0.0946,
        rating=4.0,
        review_count=100,
    )


@pytest.fixture
def charles_lamb(islington):
    """Nearby pub the manager does not manage."""
    return Pub.objects.create(
        name='The Charles Lamb',
        place_id='ChIJcharleslamb',
        city=islington.city,
        borough=islington,
        lat=51.5336,
        lng=-0.0990,
        rating=4.6,
        review_count=300,
    )


@pytest.fixture
def brighton_pub(db):
    """Pub far outside any London radius."""
    brighton = City.objects.create(name='Brighton')
    return Pub.objects.create(
        name='The Cricketers',
        place_id='ChIJcricketers',
        city=brighton,
        lat=50.8225,
        lng=-0.1427,
        rating=4.1,
        review_count=50,
    )


# =============================================================================
# Pub manager
# =============================================================================

@pytest.fixture
def manager(island_queen, narrow_boat):
    manager = Manager.objects.create(email='landlord@islandqueen.co.uk', name='Sam')
    PubManager.objects.create(manager=manager, pub=island_queen)
    PubManager.objects.create(manager=manager, pub=narrow_boat)
    return manager


@pytest.fixture
def manager_client(manager, island_queen):
    """Client carrying a pub-manager Bearer token for the Island Queen."""
    client = APIClient()
    token = issue_token(pub=island_queen, email='landlord@islandqueen.co.uk')
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client


# =============================================================================
# Events
# =============================================================================

@pytest.fixture
def make_page_views(db):
    """Create ``count`` page views for a pub, all at ``ts``."""
    def _make(pub, count, ts=None, **fields):
        ts = ts or timezone.now() - timedelta(hours=1)
        return EventPageView.objects.bulk_create([
            EventPageView(
                pub=pub,
                session_id=fields.get('session_id', f'session-{pub.place_id if pub else "area"}-{index}'),
                device=fields.get('device', ''),
                ref=fields.get('ref', ''),
                area_slug=fields.get('area_slug', ''),
                user=fields.get('user'),
                ts=ts,
            )
            for index in range(count)
        ])
    return _make
