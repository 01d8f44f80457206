"""Community data shown on a pub page."""

from apps.pubs.models import Pub
from apps.reviews.models import Review, Checkin, WishlistItem


def get_pub_user_data(*, pub: Pub, user=None) -> dict:
    """
    Community counters for a pub, plus the viewer's own state when signed in.

    Returns:
        Dict with user_review_count, user_rating_avg, wishlist_count,
        checkin_count and, for authenticated users, has_reviewed,
        has_checked_in and in_wishlist
    """
    data = {
        'user_review_count': pub.user_review_count,
        'user_rating_avg': round(pub.user_rating_avg, 2) if pub.user_rating_avg is not None else 0,
        'wishlist_count': pub.wishlist_count,
        'checkin_count': pub.checkin_count,
    }
    if user is not None and user.is_authenticated:
        data['has_reviewed'] = Review.objects.filter(user=user, pub=pub).exists()
        data['has_checked_in'] = Checkin.objects.filter(user=user, pub=pub).exists()
        data['in_wishlist'] = WishlistItem.objects.filter(user=user, pub=pub).exists()
    return data
