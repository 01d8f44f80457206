"""
Tile scoring and selection.

    score = 0.45 * ctr_7d
          + 0.25 * norm(views_7d, 0, 1000)
          + 0.15 * norm(bookings_7d, 0, 50)
          + 0.10 * norm(pub_count, 3, 100)
          + 0.05 * seasonal_boost
"""

from typing import Optional

CTR_WEIGHT = 0.45
VIEWS_WEIGHT = 0.25
BOOKINGS_WEIGHT = 0.15
PUB_COUNT_WEIGHT = 0.10
SEASONAL_WEIGHT = 0.05

MAX_PER_AREA = 2
MAX_PER_AMENITY = 3
MAX_SELECTED = 12
MIN_AMENITIES = 3

SUMMER = (6, 7, 8)
AUTUMN_WINTER = (9, 10, 11, 12, 1, 2)
SPRING = (3, 4, 5)


def normalize(value: float, low: float, high: float) -> float:
    """Scale into [0, 1], clamping outside the range."""
    return max(0.0, min(1.0, (value - low) / (high - low)))


def seasonal_boost(amenity_slug: Optional[str], month: int) -> float:
    if not amenity_slug:
        return 0.0
    if month in SUMMER and amenity_slug in ('beer-garden', 'rooftop', 'riverside'):
        return 0.2
    if month in AUTUMN_WINTER and amenity_slug in ('sunday-roast', 'fireplace', 'open-late'):
        return 0.2
    if month in SPRING and amenity_slug in ('beer-garden', 'riverside'):
        return 0.15
    return 0.0


def slot_score(*, ctr: float, views: int, bookings: int, pub_count: int, seasonal: float) -> float:
    return (
        CTR_WEIGHT * ctr +
        VIEWS_WEIGHT * normalize(views, 0, 1000) +
        BOOKINGS_WEIGHT * normalize(bookings, 0, 50) +
        PUB_COUNT_WEIGHT * normalize(pub_count, 3, 100) +
        SEASONAL_WEIGHT * seasonal
    )


def apply_diversity_rules(ranked):
    """
    Pick from best-first ``ranked`` items under the diversity caps.

    At most MAX_PER_AREA per area, MAX_PER_AMENITY per amenity and
    MAX_SELECTED overall. When fewer than MIN_AMENITIES amenities made it,
    the best item of each missing amenity is appended while room remains.
    """
    selected = []
    per_area = {}
    per_amenity = {}

    for item in ranked:
        area_key, amenity_key = item.area_slug, item.amenity_slug
        if per_area.get(area_key, 0) < MAX_PER_AREA and per_amenity.get(amenity_key, 0) < MAX_PER_AMENITY:
            selected.append(item)
            per_area[area_key] = per_area.get(area_key, 0) + 1
            per_amenity[amenity_key] = per_amenity.get(amenity_key, 0) + 1
        if len(selected) >= MAX_SELECTED:
            break

    seen_amenities = {item.amenity_slug for item in selected}
    if len(seen_amenities) < MIN_AMENITIES:
        for item in ranked:
            if len(selected) >= MAX_SELECTED:
                break
            if item.amenity_slug not in seen_amenities:
                selected.append(item)
                seen_amenities.add(item.amenity_slug)

    return selected
