"""
Reviews services - Business logic layer.

This package contains all business operations for the reviews app:
- Review CRUD operations
- Check-ins
- Wishlist
- Community counters kept on the pub row
"""

from .review_management import (
    create_review,
    get_review_by_id,
    update_review,
    delete_review,
    get_pub_reviews,
    get_user_reviews,
)
from .checkins import (
    create_checkin,
    delete_checkin,
    get_user_checkins,
)
from .wishlist import (
    add_to_wishlist,
    remove_from_wishlist,
    get_user_wishlist,
)
from .aggregates import recompute_review_aggregates, adjust_counter
from .user_data import get_pub_user_data

# Domain Exceptions
from .exceptions import (
    ReviewsServiceError,
    ReviewNotFoundError,
    DuplicateReviewError,
    InvalidReviewError,
    UnauthorizedReviewActionError,
    DuplicateCheckinError,
    CheckinNotFoundError,
    DuplicateWishlistItemError,
    WishlistItemNotFoundError,
)

__all__ = [
    # Review Management Services
    'create_review',
    'get_review_by_id',
    'update_review',
    'delete_review',
    'get_pub_reviews',
    'get_user_reviews',
    # Check-ins
    'create_checkin',
    'delete_checkin',
    'get_user_checkins',
    # Wishlist
    'add_to_wishlist',
    'remove_from_wishlist',
    'get_user_wishlist',
    # Counters
    'recompute_review_aggregates',
    'adjust_counter',
    'get_pub_user_data',
    # Exceptions
    'ReviewsServiceError',
    'ReviewNotFoundError',
    'DuplicateReviewError',
    'InvalidReviewError',
    'UnauthorizedReviewActionError',
    'DuplicateCheckinError',
    'CheckinNotFoundError',
    'DuplicateWishlistItemError',
    'WishlistItemNotFoundError',
]
