import pytest
from django.contrib.auth.hashers import make_password
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.pubs.models import City, Borough, Amenity, Pub
from apps.managers.models import Manager, PubManager
from apps.managers.services import issue_token


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
def islington(db):
    london = City.objects.create(name='London')
    return Borough.objects.create(name='Islington', city=london)


@pytest.fixture
def managed_pub(islington):
    """Pub with its own manager credentials (password 'pintsplease')."""
    return Pub.objects.create(
        name='The Island Queen',
        place_id='ChIJislandqueen',
        city=islington.city,
        borough=islington,
        postcode='N1 8HD',
        manager_email='landlord@islandqueen.co.uk',
        manager_password=make_password('pintsplease'),
    )


@pytest.fixture
def second_pub(islington):
    return Pub.objects.create(
        name='The Narrow Boat',
        place_id='ChIJnarrowboat',
        city=islington.city,
        borough=islington,
    )


@pytest.fixture
def stranger_pub(islington):
    """Pub nobody in these tests manages."""
    return Pub.objects.create(name='The Charles Lamb', place_id='ChIJcharleslamb', city=islington.city)


@pytest.fixture
def manager(managed_pub, second_pub):
    """Manager linked to both Islington pubs."""
    manager = Manager.objects.create(email='landlord@islandqueen.co.uk', name='Sam')
    PubManager.objects.create(manager=manager, pub=managed_pub)
    PubManager.objects.create(manager=manager, pub=second_pub, role='manager')
    return manager


@pytest.fixture
def manager_token(managed_pub):
    return issue_token(pub=managed_pub, email='landlord@islandqueen.co.uk')


@pytest.fixture
def manager_client(manager, manager_token):
    """Client carrying a pub-manager Bearer token."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {manager_token}')
    return client


@pytest.fixture
def amenities(db):
    return [
        Amenity.objects.create(key='beer-garden', label='Beer Garden'),
        Amenity.objects.create(key='sunday-roast', label='Sunday Roast'),
        Amenity.objects.create(key='live-music', label='Live Music'),
    ]


@pytest.fixture
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path
