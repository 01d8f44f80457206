"""Domain exceptions for reviews app."""


class ReviewsServiceError(Exception):
    """Base exception for all reviews service errors."""
    pass


class ReviewNotFoundError(ReviewsServiceError):
    """Review does not exist."""
    pass


class DuplicateReviewError(ReviewsServiceError):
    """User already reviewed this pub."""
    pass


class InvalidReviewError(ReviewsServiceError):
    """Rating, body or photos out of bounds."""
    pass


class UnauthorizedReviewActionError(ReviewsServiceError):
    """User cannot modify this review."""
    pass


class DuplicateCheckinError(ReviewsServiceError):
    """User already checked in to this pub."""
    pass


class CheckinNotFoundError(ReviewsServiceError):
    pass


class DuplicateWishlistItemError(ReviewsServiceError):
    """Pub is already on the user's wishlist."""
    pass


class WishlistItemNotFoundError(ReviewsServiceError):
    pass
