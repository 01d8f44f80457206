import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.blog.models import BlogPost


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
    user = User.objects.create_user(email='reader@example.com', password='TestPass123!', display_name='Reader')
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def make_post(db):
    """Create a post; published posts are spaced a day apart, newest last."""
    counter = {'n': 0}

    def _make(title, published=True, content='A pint and a chat. ' * 10, tags=None, **fields):
        counter['n'] += 1
        return BlogPost.objects.create(
            slug=fields.pop('slug', None) or title.lower().replace(' ', '-'),
            title=title,
            excerpt=fields.pop('excerpt', f'About {title}'),
            content=content,
            published=published,
            published_at=timezone.now() - timedelta(days=10 - counter['n']) if published else None,
            tags=tags or [],
            **fields,
        )
    return _make


@pytest.fixture
def published_posts(make_post):
    return [
        make_post('Best Beer Gardens', tags=['summer', 'beer-garden']),
        make_post('Sunday Roast Guide', tags=['food']),
        make_post('Quiz Night Roundup', tags=['summer']),
    ]
