"""
Weighted random pub picker behind the "spin the wheel" feature.

Every pub starts with weight 1.0 and earns a small bonus for a high rating
and for a large number of Google reviews, so better pubs come up slightly
more often without drowning out the rest.
"""

import json
import logging
import secrets
import uuid
from dataclasses import dataclass, field
from typing import Optional

from django.db.models import Q

from ..models import Pub
from .exceptions import InvalidFilterError, NoPubsMatchError, NoPubsAfterExclusionsError
from .opening_hours import is_open_now
from .pub_lookup import pub_queryset
from .pub_search import has_all_features

logger = logging.getLogger(__name__)

_random = secrets.SystemRandom()

SELECTION_TYPES = ('area', 'amenity', 'pub')


@dataclass
class RandomPubFilters:
    area: Optional[str] = None
    amenities: list = field(default_factory=list)
    open_now: bool = False
    min_rating: Optional[float] = None
    exclude_ids: list = field(default_factory=list)
    search_selections: list = field(default_factory=list)

    def as_dict(self):
        return {
            'area': self.area,
            'amenities': self.amenities,
            'open_now': self.open_now,
            'min_rating': self.min_rating,
            'exclude_ids': self.exclude_ids,
            'search_selections': self.search_selections,
        }


def parse_search_selections(raw: Optional[str]) -> list[dict]:
    """
    Parse the JSON list of ``{"type": "area"|"amenity"|"pub", "data": ...}``.

    Raises:
        InvalidFilterError: If the value is not a JSON list of selections
    """
    if not raw:
        return []
    try:
        selections = json.loads(raw)
    except (TypeError, ValueError):
        raise InvalidFilterError("search_selections must be valid JSON")
    if not isinstance(selections, list):
        raise InvalidFilterError("search_selections must be a list")

    parsed = []
    for selection in selections:
        if not isinstance(selection, dict) or selection.get('type') not in SELECTION_TYPES:
            raise InvalidFilterError("Each search selection needs a type of area, amenity or pub")
        parsed.append(selection)
    return parsed


def _selection_value(selection: dict, *keys) -> Optional[str]:
    """Selections carry either a plain string or an object as ``data``."""
    data = selection.get('data')
    if isinstance(data, dict):
        for key in keys:
            if data.get(key):
                return str(data[key])
        return None
    return str(data) if data else None


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def pub_weight(pub: Pub) -> float:
    """Selection weight: 1.0 plus rating and review-count bonuses."""
    weight = 1.0

    rating = pub.rating or 0
    if rating >= 4.5:
        weight += 0.05
    elif rating >= 4.0:
        weight += 0.03
    elif rating >= 3.5:
        weight += 0.01

    reviews = pub.review_count or 0
    if reviews >= 100:
        weight += 0.02
    elif reviews >= 50:
        weight += 0.01

    return weight


def weighted_choice(pubs: list[Pub], rng=None) -> Pub:
    """Roulette-wheel pick; ``rng`` defaults to a CSPRNG."""
    rng = rng or _random
    weights = [pub_weight(pub) for pub in pubs]
    point = rng.random() * sum(weights)
    for pub, weight in zip(pubs, weights):
        point -= weight
        if point <= 0:
            return pub
    return pubs[-1]


def get_candidates(*, filters: RandomPubFilters) -> list[Pub]:
    """Pubs matching every filter except the exclusions."""
    queryset = pub_queryset().with_area()

    if filters.area:
        queryset = queryset.filter(area_name__icontains=filters.area)

    if filters.min_rating is not None:
        queryset = queryset.filter(rating__gte=filters.min_rating)

    area_selections = [
        _selection_value(s, 'name', 'area') for s in filters.search_selections if s['type'] == 'area'
    ]
    area_selections = [a for a in area_selections if a]
    if area_selections:
        area_query = Q()
        for area in area_selections:
            area_query |= Q(area_name__iexact=area)
        queryset = queryset.filter(area_query)

    pub_selections = [
        _selection_value(s, 'id', 'place_id') for s in filters.search_selections if s['type'] == 'pub'
    ]
    pub_selections = [p for p in pub_selections if p]
    if pub_selections:
        pub_query = Q(place_id__in=pub_selections) | Q(slug__in=pub_selections)
        uuids = [value for value in pub_selections if _is_uuid(value)]
        if uuids:
            pub_query |= Q(id__in=uuids)
        queryset = queryset.filter(pub_query)

    candidates = list(queryset.order_by('name'))

    wanted_amenities = list(filters.amenities)
    wanted_amenities += [
        a for a in (
            _selection_value(s, 'name', 'label') for s in filters.search_selections if s['type'] == 'amenity'
        ) if a
    ]
    if wanted_amenities:
        candidates = [pub for pub in candidates if has_all_features(pub, wanted_amenities)]

    if filters.open_now:
        candidates = [pub for pub in candidates if is_open_now(pub.opening_hours)]

    return candidates


def pick_random_pub(*, filters: RandomPubFilters, rng=None) -> dict:
    """
    Pick one pub at random from those matching the filters.

    Args:
        filters: Parsed filters
        rng: Optional random source (tests pass a seeded Random)

    Returns:
        Dict with the chosen pub, total_candidates and
        available_after_exclusions

    Raises:
        NoPubsMatchError: If nothing matches the filters
        NoPubsAfterExclusionsError: If exclusions removed every candidate
    """
    candidates = get_candidates(filters=filters)
    if not candidates:
        raise NoPubsMatchError("No pubs match your current filters")

    excluded = {str(value) for value in filters.exclude_ids}
    available = [
        pub for pub in candidates
        if str(pub.id) not in excluded and (pub.place_id or '') not in excluded
    ]
    if not available:
        raise NoPubsAfterExclusionsError("No available pubs after exclusions")

    pub = weighted_choice(available, rng=rng)
    logger.debug("Random pick %s from %d candidates", pub.id, len(available))

    return {
        'pub': pub,
        'total_candidates': len(candidates),
        'available_after_exclusions': len(available),
    }
