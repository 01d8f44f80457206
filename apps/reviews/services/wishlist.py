"""Wishlist service."""

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.pubs.models import Pub
from apps.reviews.models import WishlistItem
from .aggregates import adjust_counter
from .exceptions import DuplicateWishlistItemError, WishlistItemNotFoundError


@transaction.atomic
def add_to_wishlist(*, user: User, pub: Pub) -> WishlistItem:
    """
    Raises:
        DuplicateWishlistItemError: If the pub is already on the wishlist
    """
    if WishlistItem.objects.filter(user=user, pub=pub).exists():
        raise DuplicateWishlistItemError("Pub is already in your wishlist")

    try:
        item = WishlistItem.objects.create(user=user, pub=pub)
    except IntegrityError:
        raise DuplicateWishlistItemError("Pub is already in your wishlist")

    adjust_counter(pub_id=pub.id, field='wishlist_count', delta=1)
    return item


@transaction.atomic
def remove_from_wishlist(*, user: User, pub: Pub) -> None:
    """
    Raises:
        WishlistItemNotFoundError: If the pub is not on the wishlist
    """
    deleted, _ = WishlistItem.objects.filter(user=user, pub=pub).delete()
    if not deleted:
        raise WishlistItemNotFoundError("Pub is not in your wishlist")
    adjust_counter(pub_id=pub.id, field='wishlist_count', delta=-1)


def get_user_wishlist(*, user: User) -> QuerySet[WishlistItem]:
    return WishlistItem.objects.filter(user=user).select_related('pub').order_by('-created_at')
