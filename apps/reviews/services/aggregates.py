"""Community counters stored on the pub row."""

from django.db.models import Avg, Count, F
from django.db.models.functions import Greatest

from apps.pubs.models import Pub
from apps.reviews.models import Review

COUNTER_FIELDS = ('checkin_count', 'wishlist_count')


def recompute_review_aggregates(*, pub_id) -> None:
    """Recalculate user_review_count and user_rating_avg from visible reviews."""
    stats = Review.objects.filter(pub_id=pub_id, is_visible=True).aggregate(
        count=Count('id'),
        avg=Avg('rating'),
    )
    Pub.objects.filter(id=pub_id).update(
        user_review_count=stats['count'],
        user_rating_avg=stats['avg'],
    )


def adjust_counter(*, pub_id, field: str, delta: int) -> None:
    """Increment or decrement a counter without letting it drop below zero."""
    if field not in COUNTER_FIELDS:
        raise ValueError(f"Unknown counter: {field}")
    Pub.objects.filter(id=pub_id).update(**{field: Greatest(F(field) + delta, 0)})
