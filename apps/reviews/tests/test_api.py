import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from apps.reviews.models import Review, Checkin, WishlistItem


# =============================================================================
# Review API Tests
# =============================================================================

@pytest.mark.django_db
class TestReviewCreate:
    """Tests for POST /api/reviews/"""

    def test_create(self, review_auth_client, review_pub):
        response = review_auth_client.post(reverse('reviews:review-list'), {
            'pub_id': review_pub.place_id,
            'rating': 5,
            'title': 'Lovely',
            'body': 'Cosy snugs and excellent cask ale.',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['rating'] == 5
        assert response.data['user']['display_name'] == 'Pub Reviewer'
        review_pub.refresh_from_db()
        assert review_pub.user_review_count == 1

    def test_requires_auth(self, api_client, review_pub):
        response = api_client.post(reverse('reviews:review-list'), {
            'pub_id': review_pub.place_id, 'rating': 5, 'body': 'Cosy snugs and ale.',
        }, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_duplicate(self, review_auth_client, review, review_pub):
        response = review_auth_client.post(reverse('reviews:review-list'), {
            'pub_id': str(review_pub.id), 'rating': 3, 'body': 'Trying to review twice.',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'You have already reviewed this pub'

    def test_unknown_pub(self, review_auth_client, db):
        response = review_auth_client.post(reverse('reviews:review-list'), {
            'pub_id': 'ChIJnowhere', 'rating': 3, 'body': 'Where even is this?',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_body(self, review_auth_client, review_pub):
        response = review_auth_client.post(reverse('reviews:review-list'), {
            'pub_id': review_pub.place_id, 'rating': 3, 'body': 'short',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestReviewEdit:
    """Tests for PATCH/DELETE /api/reviews/{id}/"""

    def test_author_can_edit(self, review_auth_client, review):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_auth_client.patch(url, {'rating': 2}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_edited'] is True

    def test_non_owner_forbidden(self, review_other_client, review):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_other_client.patch(url, {'rating': 1}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_non_owner_cannot_delete(self, review_other_client, review):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_other_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Review.objects.filter(id=review.id).exists()

    def test_author_can_delete(self, review_auth_client, review, review_pub):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_auth_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        review_pub.refresh_from_db()
        assert review_pub.user_review_count == 0

    def test_hidden_review_only_readable_by_author(self, review_auth_client, review_other_client, hidden_review):
        url = reverse('reviews:review-detail', kwargs={'pk': hidden_review.id})

        assert APIClient().get(url).status_code == status.HTTP_401_UNAUTHORIZED
        assert review_auth_client.get(url).status_code == status.HTTP_403_FORBIDDEN
        assert review_other_client.get(url).status_code == status.HTTP_200_OK


@pytest.mark.django_db
class TestPubReviews:
    """Tests for GET /api/pubs/{id}/reviews/"""

    def test_lists_visible_reviews(self, api_client, review, hidden_review, review_pub):
        url = reverse('reviews:pub-reviews', kwargs={'identifier': review_pub.place_id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_count'] == 1
        assert response.data['reviews'][0]['id'] == str(review.id)
        assert response['Cache-Control'] == 'public, max-age=60, stale-while-revalidate=300'

    def test_unknown_pub(self, api_client, db):
        url = reverse('reviews:pub-reviews', kwargs={'identifier': 'nope'})
        assert api_client.get(url).status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Check-in & wishlist API Tests
# =============================================================================

@pytest.mark.django_db
class TestCheckins:
    """Tests for /api/checkins/"""

    def test_checkin_and_remove(self, review_auth_client, review_pub):
        response = review_auth_client.post(
            reverse('reviews:checkin-create'), {'pub_id': review_pub.place_id, 'note': 'Lovely'}, format='json'
        )
        assert response.status_code == status.HTTP_201_CREATED

        response = review_auth_client.post(
            reverse('reviews:checkin-create'), {'pub_id': review_pub.place_id}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'You have already checked in to this pub'

        url = reverse('reviews:checkin-delete', kwargs={'pub_id': review_pub.place_id})
        assert review_auth_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert review_auth_client.delete(url).status_code == status.HTTP_404_NOT_FOUND
        assert not Checkin.objects.exists()


@pytest.mark.django_db
class TestWishlist:
    """Tests for /api/wishlist/"""

    def test_add_and_remove(self, review_auth_client, review_pub):
        response = review_auth_client.post(reverse('reviews:wishlist-add'), {'pub_id': review_pub.place_id}, format='json')
        assert response.status_code == status.HTTP_201_CREATED

        response = review_auth_client.post(reverse('reviews:wishlist-add'), {'pub_id': review_pub.place_id}, format='json')
        assert response.data['error'] == 'Pub is already in your wishlist'

        review_pub.refresh_from_db()
        assert review_pub.wishlist_count == 1

        url = reverse('reviews:wishlist-remove', kwargs={'pub_id': str(review_pub.id)})
        assert review_auth_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert not WishlistItem.objects.exists()


@pytest.mark.django_db
class TestUserData:
    """Tests for GET /api/pubs/{id}/user-data/ and /api/users/me/..."""

    def test_anonymous(self, api_client, review, review_pub):
        url = reverse('reviews:pub-user-data', kwargs={'identifier': review_pub.place_id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user_review_count'] == 1
        assert 'has_reviewed' not in response.data

    def test_authenticated(self, review_auth_client, review, review_pub):
        url = reverse('reviews:pub-user-data', kwargs={'identifier': review_pub.place_id})
        response = review_auth_client.get(url)

        assert response.data['has_reviewed'] is True
        assert response.data['in_wishlist'] is False

    def test_my_lists(self, review_auth_client, review, review_pub):
        response = review_auth_client.get(reverse('reviews:my-reviews'))
        assert response.data[0]['pub']['name'] == 'The Lamb'

        review_auth_client.post(reverse('reviews:wishlist-add'), {'pub_id': review_pub.place_id}, format='json')
        response = review_auth_client.get(reverse('reviews:my-wishlist'))
        assert len(response.data) == 1

        response = review_auth_client.get(reverse('reviews:my-checkins'))
        assert response.data == []

    def test_my_lists_require_auth(self, api_client):
        assert api_client.get(reverse('reviews:my-reviews')).status_code == status.HTTP_401_UNAUTHORIZED
