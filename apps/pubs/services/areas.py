"""
Area pages.

An area is the derived area name of a pub (its borough, else its city).
Areas are never stored; they are aggregated from the pubs table.
"""

import math
from collections import Counter

from django.db.models import Count

from ..models import Pub, AreaFeaturedPub
from .amenity_filters import get_amenity_filter, pub_matches_amenity
from .exceptions import AreaNotFoundError, AmenityFilterNotFoundError
from .pub_lookup import pub_queryset
from .slugs import generate_slug

INDEXABLE_MIN_PUBS = 10
TOP_PUBS_LIMIT = 10
TOP_AMENITIES_LIMIT = 5
BOUNDS_PADDING = 0.01

LONDON_BOUNDS = {
    'north': 51.7,
    'south': 51.3,
    'east': 0.3,
    'west': -0.5,
}

SUMMARY_TEMPLATES = (
    "Discover the best pubs in {area}, home to {count} fantastic drinking establishments. "
    "From traditional British pubs with roaring fireplaces to modern gastropubs serving craft beer, "
    "{area} offers something for every taste. Many venues feature {two_amenities}, making it perfect "
    "for both casual drinks and special occasions.",
    "{area} boasts an impressive collection of {count} pubs and bars, each offering its own unique "
    "character and atmosphere. The area is particularly known for {two_amenities}, attracting locals "
    "and visitors alike. From historic pubs dating back centuries to contemporary venues with "
    "innovative cocktail menus, {area} provides a diverse drinking experience.",
    "With {count} pubs to choose from, {area} stands out as one of London's premier destinations for "
    "pub enthusiasts. The area's venues range from intimate neighbourhood pubs to bustling bars, many "
    "featuring {three_amenities}. Whether you're planning a weekend pub crawl or looking for the "
    "perfect spot for after-work drinks, {area} delivers.",
)


def string_hash(text: str) -> int:
    """31-based rolling hash truncated to a signed 32-bit integer."""
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def area_summary(area_name: str, pub_count: int, top_amenities: list[str]) -> str:
    """Pick one of the summary templates, stable for a given area name."""
    template = SUMMARY_TEMPLATES[abs(string_hash(area_name)) % len(SUMMARY_TEMPLATES)]
    amenities = top_amenities or ['great beer']
    return template.format(
        area=area_name,
        count=pub_count,
        two_amenities=' and '.join(amenities[:2]),
        three_amenities=', '.join(amenities[:3]),
    )


def calculate_bounds(pubs) -> dict:
    """Padded bounding box of pubs with coordinates, London when none have any."""
    points = [(pub.lat, pub.lng) for pub in pubs if pub.lat is not None and pub.lng is not None]
    if not points:
        return dict(LONDON_BOUNDS)
    lats = [lat for lat, _ in points]
    lngs = [lng for _, lng in points]
    return {
        'north': max(lats) + BOUNDS_PADDING,
        'south': min(lats) - BOUNDS_PADDING,
        'east': max(lngs) + BOUNDS_PADDING,
        'west': min(lngs) - BOUNDS_PADDING,
    }


def top_amenities(pubs, limit: int = TOP_AMENITIES_LIMIT) -> list[str]:
    counts = Counter()
    for pub in pubs:
        counts.update(pub.display_features())
    return [name for name, _ in counts.most_common(limit)]


def list_areas(*, min_pubs: int = 1) -> list[dict]:
    """
    All areas with their pub counts, largest first.

    Returns:
        List of dicts with name, slug, pub_count, is_indexable
    """
    rows = (
        Pub.objects.with_area()
        .exclude(area_name__isnull=True)
        .exclude(area_name='')
        .values('area_name')
        .annotate(pub_count=Count('id'))
        .order_by('-pub_count', 'area_name')
    )
    return [
        {
            'name': row['area_name'],
            'slug': generate_slug(row['area_name']),
            'pub_count': row['pub_count'],
            'is_indexable': row['pub_count'] >= INDEXABLE_MIN_PUBS,
        }
        for row in rows
        if row['pub_count'] >= min_pubs
    ]


def resolve_area_name(slug: str) -> str:
    """
    Map an area slug back to its display name.

    Raises:
        AreaNotFoundError: If no area has this slug
    """
    for area in list_areas():
        if area['slug'] == slug:
            return area['name']
    raise AreaNotFoundError("Area not found")


def area_pubs(area_name: str) -> list[Pub]:
    """Pubs in an area ordered by rating, then review count, then name."""
    return list(
        pub_queryset().in_area(area_name).order_by('-rating', '-review_count', 'name')
    )


def get_area(*, slug: str) -> dict:
    """
    Everything an area landing page needs.

    Raises:
        AreaNotFoundError: If no area has this slug
    """
    area_name = resolve_area_name(slug)
    pubs = area_pubs(area_name)
    amenities = top_amenities(pubs)
    featured = (
        AreaFeaturedPub.objects
        .filter(area_name__iexact=area_name)
        .select_related('pub')
    )

    return {
        'name': area_name,
        'slug': slug,
        'pub_count': len(pubs),
        'top_pubs': pubs[:TOP_PUBS_LIMIT],
        'bounds': calculate_bounds(pubs),
        'summary': area_summary(area_name, len(pubs), amenities),
        'top_amenities': amenities,
        'featured_pubs': list(featured),
        'is_indexable': len(pubs) >= INDEXABLE_MIN_PUBS,
    }


def get_area_pubs_page(*, slug: str, page: int = 1, limit: int = 20) -> dict:
    """Paginated pubs of one area."""
    area_name = resolve_area_name(slug)
    pubs = area_pubs(area_name)
    limit = max(1, min(limit, 100))
    page = max(1, page)
    total_pages = math.ceil(len(pubs) / limit) if pubs else 0
    start = (page - 1) * limit
    return {
        'area': area_name,
        'pubs': pubs[start:start + limit],
        'total': len(pubs),
        'page': page,
        'total_pages': total_pages,
        'has_more': page < total_pages,
    }


def get_area_amenity_page(*, slug: str, amenity_slug: str) -> dict:
    """
    Pubs in an area matching one amenity filter.

    Raises:
        AreaNotFoundError: If the area slug is unknown
        AmenityFilterNotFoundError: If the amenity slug is unknown
    """
    amenity = get_amenity_filter(amenity_slug)
    if amenity is None:
        raise AmenityFilterNotFoundError("Amenity not found")

    area_name = resolve_area_name(slug)
    pubs = area_pubs(area_name)
    matching = [pub for pub in pubs if pub_matches_amenity(pub, amenity)]

    return {
        'area': area_name,
        'area_slug': slug,
        'amenity': amenity,
        'title': f"Best {amenity.title} pubs in {area_name}",
        'pubs': matching,
        'matching_count': len(matching),
        'total_pubs': len(pubs),
        'bounds': calculate_bounds(matching or pubs),
    }
