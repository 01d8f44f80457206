"""Blog newsletter subscriptions."""

import logging

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from apps.blog.models import BlogSubscription
from .exceptions import InvalidSubscriptionError

logger = logging.getLogger(__name__)


def subscribe(*, email) -> tuple[BlogSubscription, bool]:
    """
    Subscribe an email address to the blog.

    Args:
        email: Address as typed; trimmed and lowercased before storing

    Returns:
        (subscription, created) - created is False when already subscribed

    Raises:
        InvalidSubscriptionError: If the address is not a valid email
    """
    email = (email or '').strip().lower() if isinstance(email, str) else ''
    try:
        validate_email(email)
    except ValidationError:
        raise InvalidSubscriptionError("Please enter a valid email address")

    existing = BlogSubscription.objects.filter(email=email).first()
    if existing:
        return existing, False

    try:
        with transaction.atomic():
            subscription = BlogSubscription.objects.create(email=email)
    except IntegrityError:
        # Concurrent signup with the same address
        return BlogSubscription.objects.get(email=email), False

    logger.info("New blog subscription")
    return subscription, True


def list_subscriptions():
    return BlogSubscription.objects.order_by('-created_at')
