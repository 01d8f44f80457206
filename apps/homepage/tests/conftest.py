import pytest
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.pubs.models import City, Borough, Pub
from apps.homepage.models import HomepageSlot


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


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
def user_client(db):
    user = User.objects.create_user(email='drinker@example.com', password='testpass123', display_name='Drinker')
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def cron_client(settings):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {settings.CRON_SECRET}')
    return client


# =============================================================================
# Pubs
# =============================================================================

@pytest.fixture
def london(db):
    return City.objects.create(name='London')


def _add_pubs(borough, prefix, feature_sets):
    for n, features in enumerate(feature_sets, start=1):
        Pub.objects.create(
            name=f'{prefix} Arms {n}',
            place_id=f'ChIJ{prefix.lower()}{n:03d}',
            city=borough.city,
            borough=borough,
            lat=51.54,
            lng=-0.14,
            features=list(features),
        )


@pytest.fixture
def camden_pubs(london):
    """
    Ten Camden pubs: four with a beer garden and dogs welcome, three doing
    a Sunday roast and three with nothing listed.
    """
    camden = Borough.objects.create(name='Camden', city=london)
    _add_pubs(
        camden, 'Camden',
        [('Beer garden', 'Dog friendly')] * 4 + [('Sunday roast',)] * 3 + [()] * 3,
    )
    return camden


@pytest.fixture
def small_area_pubs(london):
    """Nine Hackney pubs, one short of a candidate area."""
    hackney = Borough.objects.create(name='Hackney', city=london)
    _add_pubs(hackney, 'Hackney', [('Beer garden',)] * 9)
    return hackney


@pytest.fixture
def make_slot(db):
    def _make(area_slug, amenity_slug, position=1, is_active=True, **fields):
        fields.setdefault('title', f'{amenity_slug} in {area_slug}')
        fields.setdefault('href', f'/area/{area_slug}/{amenity_slug}')
        return HomepageSlot.objects.create(
            area_slug=area_slug,
            amenity_slug=amenity_slug,
            position=position,
            is_active=is_active,
            **fields,
        )
    return _make
