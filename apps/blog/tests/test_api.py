import pytest
from django.urls import reverse
from rest_framework import status

from apps.blog.models import BlogPost, BlogSubscription


# =============================================================================
# Public
# =============================================================================

@pytest.mark.django_db
class TestBlogList:
    """Tests for GET /api/blog/"""

    def test_coming_soon(self, api_client, settings, make_post):
        settings.BLOG_MIN_PUBLISHED = 3
        make_post('Only Post')

        response = api_client.get(reverse('blog:post-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['coming_soon'] is True
        assert len(response.data['posts']) == 1

    def test_published_newest_first(self, api_client, settings, published_posts, make_post):
        settings.BLOG_MIN_PUBLISHED = 3
        make_post('Draft', published=False)

        response = api_client.get(reverse('blog:post-list'))

        assert response.data['coming_soon'] is False
        assert [post['slug'] for post in response.data['posts']] == [
            'quiz-night-roundup', 'sunday-roast-guide', 'best-beer-gardens',
        ]
        assert 'content' not in response.data['posts'][0]
        assert response.data['posts'][0]['reading_time'] == 1


@pytest.mark.django_db
class TestBlogDetail:
    """Tests for GET /api/blog/{slug}/"""

    def test_published_post(self, api_client, published_posts):
        response = api_client.get(reverse('blog:post-detail', kwargs={'slug': 'best-beer-gardens'}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['title'] == 'Best Beer Gardens'
        assert response.data['reading_time'] == 1
        assert 'content' in response.data
        assert response.data['related'][0]['slug'] == 'quiz-night-roundup'

    def test_draft_is_404(self, api_client, make_post):
        make_post('Secret', published=False)

        response = api_client.get(reverse('blog:post-detail', kwargs={'slug': 'secret'}))

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestBlogRss:
    """Tests for GET /api/blog/rss/"""

    def test_feed(self, api_client, settings, published_posts):
        settings.BLOG_MIN_PUBLISHED = 3

        response = api_client.get(reverse('blog:rss'))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('application/rss+xml')
        assert 'max-age=3600' in response['Cache-Control']
        assert b'Best Beer Gardens' in response.content

    def test_feed_reader_accept_header(self, api_client, settings, published_posts):
        settings.BLOG_MIN_PUBLISHED = 3

        response = api_client.get(reverse('blog:rss'), HTTP_ACCEPT='application/rss+xml')

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('application/rss+xml')

    def test_coming_soon_is_204(self, api_client, settings, make_post):
        settings.BLOG_MIN_PUBLISHED = 3
        make_post('Lonely Post')

        response = api_client.get(reverse('blog:rss'))

        assert response.status_code == status.HTTP_204_NO_CONTENT


@pytest.mark.django_db
class TestSubscribe:
    """Tests for POST /api/subscribe/"""

    def test_new_then_existing(self, api_client):
        url = reverse('blog:subscribe')

        first = api_client.post(url, {'email': 'Reader@Example.com'}, format='json')
        second = api_client.post(url, {'email': 'reader@example.com'}, format='json')

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_200_OK
        assert "already subscribed" in second.data['message']
        assert BlogSubscription.objects.get().email == 'reader@example.com'

    def test_invalid_email(self, api_client):
        response = api_client.post(reverse('blog:subscribe'), {'email': 'nope'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False


# =============================================================================
# Admin
# =============================================================================

@pytest.mark.django_db
class TestAdminBlogPosts:
    """Tests for GET/POST /api/admin/blog/"""

    def test_requires_staff(self, user_client):
        response = user_client.get(reverse('blog:admin-posts'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_with_filter(self, admin_client, published_posts, make_post):
        make_post('Draft', published=False)

        response = admin_client.get(reverse('blog:admin-posts'), {'published': 'false'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == 1
        assert response.data['posts'][0]['title'] == 'Draft'
        assert response.data['posts'][0]['published'] is False

    def test_create(self, admin_client):
        response = admin_client.post(reverse('blog:admin-posts'), {
            'title': 'Riverside Pubs',
            'content': 'Pints by the Thames.',
            'published': True,
            'tags': ['riverside'],
            'map_config': {'area': 'southwark'},
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        post = response.data['post']
        assert post['slug'] == 'riverside-pubs'
        assert post['published_at'] is not None
        assert post['map_config'] == {'area': 'southwark'}

    def test_create_duplicate_slug(self, admin_client, published_posts):
        response = admin_client.post(reverse('blog:admin-posts'), {
            'title': 'Best Beer Gardens',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Slug already in use'


@pytest.mark.django_db
class TestAdminBlogPostDetail:
    """Tests for /api/admin/blog/{id}/"""

    def test_retrieve_update_delete(self, admin_client, make_post):
        post = make_post('Draft', published=False)
        url = reverse('blog:admin-post-detail', kwargs={'post_id': post.id})

        response = admin_client.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['post']['slug'] == 'draft'

        response = admin_client.put(url, {'title': 'Now Live', 'published': True}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['post']['title'] == 'Now Live'
        assert response.data['post']['published_at'] is not None

        response = admin_client.delete(url)
        assert response.status_code == status.HTTP_200_OK
        assert not BlogPost.objects.exists()

    def test_missing(self, admin_client):
        url = reverse('blog:admin-post-detail', kwargs={'post_id': '00000000-0000-0000-0000-000000000000'})
        assert admin_client.get(url).status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestAdminBlogOptions:
    """Tests for GET /api/admin/blog/options/"""

    def test_lists_amenities(self, admin_client):
        response = admin_client.get(reverse('blog:admin-options'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['areas'] == []
        assert {'slug': 'sunday-roast', 'title': 'Sunday roast'} in response.data['amenities']


@pytest.mark.django_db
class TestAdminBlogSubscriptions:
    """Tests for GET /api/admin/blog-subscriptions/"""

    def test_list(self, admin_client):
        BlogSubscription.objects.create(email='a@example.com')
        BlogSubscription.objects.create(email='b@example.com')

        response = admin_client.get(reverse('blog:admin-subscriptions'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == 2
        assert {row['email'] for row in response.data['subscriptions']} == {'a@example.com', 'b@example.com'}
