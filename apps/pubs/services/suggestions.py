"""Search-box suggestions across areas, amenity filters and pubs."""

import math

from ..models import Pub
from .amenity_filters import AMENITY_FILTERS
from .areas import list_areas

MIN_QUERY_LENGTH = 2


def _rank(names, query):
    """Exact matches first, then prefix matches, then shorter names."""
    lowered = query.lower()
    return sorted(
        names,
        key=lambda item: (
            item[0].lower() != lowered,
            not item[0].lower().startswith(lowered),
            len(item[0]),
            item[0].lower(),
        ),
    )


def get_suggestions(*, query: str, limit: int = 9) -> list[dict]:
    """
    Suggest areas, amenities and pubs for a partial query.

    Each kind gets up to ``ceil(limit / 3)`` entries.

    Args:
        query: Text typed so far
        limit: Overall limit

    Returns:
        List of dicts with type, label and value (slug or pub id)
    """
    query = (query or '').strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    per_type = max(1, math.ceil(limit / 3))
    lowered = query.lower()

    areas = [
        (area['name'], area['slug'])
        for area in list_areas()
        if lowered in area['name'].lower()
    ]
    amenities = [
        (amenity.title, amenity.slug)
        for amenity in AMENITY_FILTERS
        if lowered in amenity.title.lower() or any(lowered in term for term in amenity.search_terms)
    ]
    pubs = [
        (name, str(pub_id))
        for pub_id, name in Pub.objects.filter(name__icontains=query).values_list('id', 'name')[:200]
    ]

    suggestions = []
    for kind, items in (('area', areas), ('amenity', amenities), ('pub', pubs)):
        for label, value in _rank(items, query)[:per_type]:
            suggestions.append({'type': kind, 'label': label, 'value': value})
    return suggestions
