import pytest
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.accounts.services import token_pair

PASSWORD = 'PintOfBitter42'


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def drinker(db):
    return User.objects.create_user(
        email='drinker@example.com',
        password=PASSWORD,
        display_name='Regular Drinker',
    )


@pytest.fixture
def closed_account(db):
    return User.objects.create_user(
        email='closed@example.com',
        password=PASSWORD,
        is_active=False,
    )


@pytest.fixture
def drinker_client(api_client, drinker):
    """API client carrying the drinker's JWT access token."""
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token_pair(drinker)['access']}")
    return api_client
