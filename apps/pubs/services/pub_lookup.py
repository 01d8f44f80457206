"""Pub lookup by the identifiers that appear in URLs."""

import uuid

from django.db.models import QuerySet

from ..models import Pub
from .exceptions import PubNotFoundError
from .slugs import extract_place_id


def pub_queryset() -> QuerySet[Pub]:
    """Pubs with the relations every serializer touches."""
    return Pub.objects.select_related('city', 'borough').prefetch_related('pub_amenities__amenity')


def get_pub(*, identifier: str) -> Pub:
    """
    Find a pub by Google Place ID, UUID, slug, or a slug embedding a Place ID.

    Args:
        identifier: Value taken from the URL

    Returns:
        Pub instance

    Raises:
        PubNotFoundError: If nothing matches
    """
    identifier = str(identifier or '').strip()
    if not identifier:
        raise PubNotFoundError("Pub not found")

    queryset = pub_queryset()

    pub = queryset.filter(place_id=identifier).first()
    if pub:
        return pub

    try:
        pub = queryset.filter(id=uuid.UUID(identifier)).first()
    except ValueError:
        pub = None
    if pub:
        return pub

    pub = queryset.filter(slug=identifier).first()
    if pub:
        return pub

    place_id = extract_place_id(identifier)
    if place_id:
        pub = queryset.filter(place_id=place_id).first()
        if pub:
            return pub

    raise PubNotFoundError("Pub not found")
