"""Pub search and filtering service."""

import math
from typing import Optional

from django.db.models import Q

from ..models import Pub
from .exceptions import InvalidFilterError
from .pub_lookup import pub_queryset

MAX_PAGE_SIZE = 2000
DEFAULT_PAGE_SIZE = 20

LATE_NIGHT_FILTER = 'Late Night (After 11pm)'

# Price bands are inferred from rating: (min inclusive, max exclusive)
PRICE_RANGES = {
    'Budget': (None, 4.0),
    'Mid-range': (4.0, 4.5),
    'Premium': (4.5, 4.8),
    'Luxury': (4.8, None),
}

SORT_FIELDS = {
    'name': 'name',
    'rating': 'rating',
    'review_count': 'review_count',
}


def price_range_for_rating(rating: float) -> str:
    """Price band label shown next to a pub."""
    for label, (low, high) in PRICE_RANGES.items():
        if (low is None or rating >= low) and (high is None or rating < high):
            return label
    return 'Budget'


def parse_csv_list(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def has_all_features(pub: Pub, wanted: list[str]) -> bool:
    """Case-insensitive containment of every wanted feature."""
    available = {feature.lower() for feature in pub.display_features()}
    return all(feature.lower() in available for feature in wanted)


def search_pubs(
    *,
    search: Optional[str] = None,
    borough: Optional[str] = None,
    pub_type: Optional[str] = None,
    features: Optional[list[str]] = None,
    min_rating: Optional[float] = None,
    price_range: Optional[str] = None,
    opening: Optional[str] = None,
    bounds: Optional[dict] = None,
    sort_by: str = 'name',
    sort_order: str = 'asc',
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> dict:
    """
    Search and filter pubs for the directory and map views.

    Args:
        search: Term matched against name, description and address
        borough: Area name (borough or city), substring match
        pub_type: Exact pub type, e.g. 'Gastro Pub'
        features: Features/amenity labels the pub must all have
        min_rating: Minimum Google rating
        price_range: One of PRICE_RANGES
        opening: Opening filter label (only late-night is supported)
        bounds: Map bounds dict with north/south/east/west
        sort_by: name, rating or review_count
        sort_order: asc or desc
        page: 1-based page number
        limit: Page size, capped at MAX_PAGE_SIZE

    Returns:
        Dict with pubs (model instances for the page), total, page,
        total_pages and has_more

    Raises:
        InvalidFilterError: If price range, sort or bounds are invalid
    """
    queryset = pub_queryset().with_area()

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(description__icontains=search) |
            Q(address__icontains=search)
        )

    if borough:
        queryset = queryset.filter(area_name__icontains=borough)

    if pub_type:
        queryset = queryset.filter(type=pub_type)

    if min_rating is not None:
        queryset = queryset.filter(rating__gte=min_rating)

    if price_range:
        if price_range not in PRICE_RANGES:
            raise InvalidFilterError(
                f"Invalid price range: '{price_range}'. Valid options: {', '.join(PRICE_RANGES)}"
            )
        low, high = PRICE_RANGES[price_range]
        if low is not None:
            queryset = queryset.filter(rating__gte=low)
        if high is not None:
            queryset = queryset.filter(rating__lt=high)

    if bounds:
        try:
            queryset = queryset.filter(
                lat__lte=float(bounds['north']),
                lat__gte=float(bounds['south']),
                lng__lte=float(bounds['east']),
                lng__gte=float(bounds['west']),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidFilterError("Bounds must include numeric north, south, east and west")

    if opening == LATE_NIGHT_FILTER:
        queryset = queryset.filter(
            Q(opening_hours__contains='11:00 PM') | Q(opening_hours__contains='12:00 AM')
        )

    if sort_by not in SORT_FIELDS:
        raise InvalidFilterError(
            f"Invalid sort field: '{sort_by}'. Valid options: {', '.join(SORT_FIELDS)}"
        )
    order_field = SORT_FIELDS[sort_by]
    if sort_order == 'desc':
        order_field = f'-{order_field}'
    queryset = queryset.order_by(order_field, 'name')

    limit = max(1, min(limit, MAX_PAGE_SIZE))
    page = max(1, page)
    start = (page - 1) * limit

    # Features span the JSON list and amenity labels, so they are matched in Python
    if features:
        matching = [pub for pub in queryset if has_all_features(pub, features)]
        total = len(matching)
        pubs = matching[start:start + limit]
    else:
        total = queryset.count()
        pubs = list(queryset[start:start + limit])

    total_pages = math.ceil(total / limit) if total else 0

    return {
        'pubs': pubs,
        'total': total,
        'page': page,
        'total_pages': total_pages,
        'has_more': page < total_pages,
    }
