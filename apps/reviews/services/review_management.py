"""Review management service - CRUD operations for pub reviews."""

import logging
import math
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.pubs.models import Pub
from apps.reviews.models import Review
from .aggregates import recompute_review_aggregates
from .exceptions import (
    ReviewNotFoundError,
    DuplicateReviewError,
    InvalidReviewError,
    UnauthorizedReviewActionError,
)

logger = logging.getLogger(__name__)

BODY_MIN_LENGTH = 10
BODY_MAX_LENGTH = 2000
TITLE_MAX_LENGTH = 100
MAX_PHOTOS = 5
MAX_PAGE_SIZE = 50


def _validate(*, rating=None, title=None, body=None, photos=None):
    if rating is not None and not (1 <= rating <= 5):
        raise InvalidReviewError("Rating must be between 1 and 5")
    if title is not None and len(title) > TITLE_MAX_LENGTH:
        raise InvalidReviewError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    if body is not None and not (BODY_MIN_LENGTH <= len(body.strip()) <= BODY_MAX_LENGTH):
        raise InvalidReviewError(
            f"Review must be between {BODY_MIN_LENGTH} and {BODY_MAX_LENGTH} characters"
        )
    if photos is not None and len(photos) > MAX_PHOTOS:
        raise InvalidReviewError(f"A review can have at most {MAX_PHOTOS} photos")


@transaction.atomic
def create_review(
    *,
    user: User,
    pub: Pub,
    rating: int,
    body: str,
    title: str = '',
    photos: Optional[list[str]] = None,
) -> Review:
    """
    Create a review and refresh the pub's community rating.

    Args:
        user: Author
        pub: Pub being reviewed
        rating: 1-5
        body: Review text (10-2000 characters)
        title: Optional headline
        photos: Up to 5 photo URLs

    Returns:
        Created Review instance

    Raises:
        InvalidReviewError: If any field is out of bounds
        DuplicateReviewError: If the user already reviewed this pub
    """
    _validate(rating=rating, title=title, body=body, photos=photos)

    if Review.objects.filter(user=user, pub=pub).exists():
        raise DuplicateReviewError("You have already reviewed this pub")

    try:
        review = Review.objects.create(
            user=user,
            pub=pub,
            rating=rating,
            title=title or '',
            body=body.strip(),
            photos=photos or [],
        )
    except IntegrityError:
        raise DuplicateReviewError("You have already reviewed this pub")

    recompute_review_aggregates(pub_id=pub.id)
    logger.info("Review %s created for pub %s", review.id, pub.id)
    return review


def get_review_by_id(*, review_id: UUID) -> Review:
    try:
        return Review.objects.select_related('user', 'pub').get(id=review_id)
    except Review.DoesNotExist:
        raise ReviewNotFoundError("Review not found")


@transaction.atomic
def update_review(
    *,
    review_id: UUID,
    user: User,
    rating: Optional[int] = None,
    title: Optional[str] = None,
    body: Optional[str] = None,
    photos: Optional[list[str]] = None,
) -> Review:
    """
    Update a review. Only the author may edit; edits are flagged.

    Raises:
        ReviewNotFoundError: If review doesn't exist
        UnauthorizedReviewActionError: If user is not the author
        InvalidReviewError: If any field is out of bounds
    """
    try:
        review = Review.objects.select_for_update().get(id=review_id)
    except Review.DoesNotExist:
        raise ReviewNotFoundError("Review not found")

    if review.user_id != user.id:
        raise UnauthorizedReviewActionError("You can only update your own reviews")

    _validate(rating=rating, title=title, body=body, photos=photos)

    if rating is not None:
        review.rating = rating
    if title is not None:
        review.title = title
    if body is not None:
        review.body = body.strip()
    if photos is not None:
        review.photos = photos
    review.is_edited = True
    review.save()

    recompute_review_aggregates(pub_id=review.pub_id)
    return review


@transaction.atomic
def delete_review(*, review_id: UUID, user: User) -> None:
    """
    Delete a review (author only) and refresh the pub's community rating.

    Raises:
        ReviewNotFoundError: If review doesn't exist
        UnauthorizedReviewActionError: If user is not the author
    """
    try:
        review = Review.objects.select_for_update().get(id=review_id)
    except Review.DoesNotExist:
        raise ReviewNotFoundError("Review not found")

    if review.user_id != user.id:
        raise UnauthorizedReviewActionError("You can only delete your own reviews")

    pub_id = review.pub_id
    review.delete()
    recompute_review_aggregates(pub_id=pub_id)


def get_pub_reviews(*, pub: Pub, page: int = 1, limit: int = 10) -> dict:
    """
    Visible reviews of a pub, newest first.

    Returns:
        Dict with reviews (page of Review instances), total_count,
        current_page, total_pages and has_more
    """
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    page = max(1, page)
    queryset = Review.objects.filter(pub=pub, is_visible=True).select_related('user').order_by('-created_at')
    total = queryset.count()
    total_pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit
    return {
        'reviews': list(queryset[start:start + limit]),
        'total_count': total,
        'current_page': page,
        'total_pages': total_pages,
        'has_more': page < total_pages,
    }


def get_user_reviews(*, user: User) -> QuerySet[Review]:
    return Review.objects.filter(user=user).select_related('pub').order_by('-created_at')
