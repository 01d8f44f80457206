import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.pubs.models import City, Borough, Amenity, Pub, PubAmenity


@pytest.fixture(autouse=True)
def clear_cache():
    """Photo-name lookups are cached between requests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create and return a staff user."""
    return User.objects.create_user(
        email='admin@pubclub.co.uk',
        password='adminpass123',
        display_name='Admin',
        is_staff=True,
    )


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='drinker@example.com',
        password='testpass123',
        display_name='Drinker',
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    """Return an API client authenticated as staff."""
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def london(db):
    return City.objects.create(name='London')


@pytest.fixture
def camden(london):
    return Borough.objects.create(name='Camden', city=london)


@pytest.fixture
def hackney(london):
    return Borough.objects.create(name='Hackney', city=london)


@pytest.fixture
def make_pub(london):
    """Factory for pubs; amenity labels are attached as PubAmenity rows."""
    counter = {'n': 0}

    def _make_pub(name='The Test Arms', amenities=(), **kwargs):
        counter['n'] += 1
        kwargs.setdefault('place_id', f"ChIJtest{counter['n']:04d}")
        kwargs.setdefault('city', london)
        kwargs.setdefault('address', f"{counter['n']} High Street, London")
        kwargs.setdefault('lat', 51.5)
        kwargs.setdefault('lng', -0.12)
        pub = Pub.objects.create(name=name, **kwargs)
        for label in amenities:
            amenity, _ = Amenity.objects.get_or_create(
                key=label.lower().replace(' ', '-'),
                defaults={'label': label},
            )
            PubAmenity.objects.create(pub=pub, amenity=amenity)
        return pub

    return _make_pub


@pytest.fixture
def pub(make_pub, camden):
    """A well rated Camden pub with a beer garden."""
    return make_pub(
        name='The Camden Head',
        borough=camden,
        rating=4.6,
        review_count=320,
        type='Traditional',
        features=['Food Served'],
        amenities=['Beer Garden', 'Dog Friendly'],
        phone='020 7485 4019',
        website='https://camdenhead.example',
        opening_hours=(
            'Monday: 12:00 PM – 11:00 PM;Tuesday: 12:00 PM – 11:00 PM;'
            'Wednesday: 12:00 PM – 11:00 PM;Thursday: 12:00 PM – 11:00 PM;'
            'Friday: 12:00 PM – 1:00 AM;Saturday: 12:00 PM – 1:00 AM;Sunday: Closed'
        ),
    )


@pytest.fixture
def other_pub(make_pub, hackney):
    return make_pub(
        name='Hackney Tap',
        borough=hackney,
        rating=3.8,
        review_count=40,
        type='Modern',
        features=['Bar'],
        amenities=['Live Music'],
        lat=51.545,
        lng=-0.055,
    )
