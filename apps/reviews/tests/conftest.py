import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.pubs.models import City, Pub
from apps.reviews.models import Review


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def review_user(db):
    """Create and return a test user for reviews."""
    return User.objects.create_user(
        email='reviewer@example.com',
        password='TestPass123!',
        display_name='Pub Reviewer',
    )


@pytest.fixture
def review_other_user(db):
    return User.objects.create_user(
        email='review_other@example.com',
        password='TestPass123!',
        display_name='Other Reviewer',
    )


@pytest.fixture
def review_auth_client(api_client, review_user):
    """Return API client authenticated as review user."""
    refresh = RefreshToken.for_user(review_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def review_other_client(review_other_user):
    client = APIClient()
    refresh = RefreshToken.for_user(review_other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def review_pub(db):
    """Create and return a pub to review."""
    city = City.objects.create(name='London')
    return Pub.objects.create(
        name='The Lamb',
        place_id='ChIJlamb',
        city=city,
        address="94 Lamb's Conduit St",
        rating=4.5,
    )


@pytest.fixture
def review(review_user, review_pub):
    """A visible review, with the pub's counters already in step."""
    from apps.reviews.services import create_review
    return create_review(
        user=review_user,
        pub=review_pub,
        rating=4,
        title='Proper pub',
        body='Great beer and a friendly landlord.',
    )


@pytest.fixture
def hidden_review(review_other_user, review_pub):
    return Review.objects.create(
        user=review_other_user,
        pub=review_pub,
        rating=1,
        body='Hidden by moderators for abuse.',
        is_visible=False,
    )
