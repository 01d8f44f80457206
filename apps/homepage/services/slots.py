"""
Homepage slots: candidate generation, regeneration and manual selection.

A candidate is an area with at least MIN_AREA_PUBS pubs crossed with an
amenity filter that at least MIN_AMENITY_PUBS of those pubs match.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.analytics.analytics import AnalyticsQueries
from apps.pubs.services import AMENITY_FILTERS, list_areas, pub_matches_amenity
from apps.pubs.services.amenity_filters import AmenityFilter
from apps.pubs.services.areas import area_pubs
from apps.homepage.models import HomepageSlot
from .exceptions import InvalidSlotsError
from .scoring import apply_diversity_rules, seasonal_boost, slot_score

logger = logging.getLogger(__name__)

MIN_AREA_PUBS = 10
MIN_AMENITY_PUBS = 3
ACTIVE_SLOTS = 6
ENGAGEMENT_DAYS = 7

FALLBACK_SLOTS = (
    {
        'area_slug': 'wandsworth',
        'amenity_slug': 'dog-friendly',
        'title': 'Dog Friendly Pubs in Wandsworth',
        'subtitle': 'Pubs where your furry friend is welcome',
        'href': '/area/wandsworth/dog-friendly',
        'icon': '🐕',
        'pub_count': 12,
        'score': 0.95,
        'is_seasonal': False,
    },
    {
        'area_slug': 'sutton',
        'amenity_slug': 'cocktails',
        'title': 'Cocktails in Sutton',
        'subtitle': 'Creative drinks & mixology',
        'href': '/area/sutton/cocktails',
        'icon': '🍸',
        'pub_count': 12,
        'score': 0.92,
        'is_seasonal': False,
    },
    {
        'area_slug': 'croydon',
        'amenity_slug': 'real-ale-craft-beer',
        'title': 'Real Ale & Craft Beer in Croydon',
        'subtitle': 'Local brews & independent taps',
        'href': '/area/croydon/real-ale-craft-beer',
        'icon': '🍺',
        'pub_count': 15,
        'score': 0.89,
        'is_seasonal': False,
    },
    {
        'area_slug': 'bromley',
        'amenity_slug': 'food-served',
        'title': 'Great Food in Bromley',
        'subtitle': 'Delicious meals & pub classics',
        'href': '/area/bromley/food-served',
        'icon': '🍽️',
        'pub_count': 18,
        'score': 0.87,
        'is_seasonal': False,
    },
    {
        'area_slug': 'kingston-upon-thames',
        'amenity_slug': 'cocktails',
        'title': 'Cocktails in Kingston upon Thames',
        'subtitle': 'Creative drinks & mixology',
        'href': '/area/kingston-upon-thames/cocktails',
        'icon': '🍸',
        'pub_count': 6,
        'score': 0.85,
        'is_seasonal': False,
    },
    {
        'area_slug': 'sutton',
        'amenity_slug': 'live-music',
        'title': 'Live Music in Sutton',
        'subtitle': 'Bands, DJs & acoustic nights',
        'href': '/area/sutton/live-music',
        'icon': '🎵',
        'pub_count': 10,
        'score': 0.83,
        'is_seasonal': False,
    },
)


@dataclass
class Candidate:
    area_slug: str
    area_name: str
    area_pub_count: int
    amenity: AmenityFilter
    pub_count: int
    score: float = 0.0
    is_seasonal: bool = False

    @property
    def amenity_slug(self) -> str:
        return self.amenity.slug

    @property
    def href(self) -> str:
        return f'/area/{self.area_slug}/{self.amenity.slug}'

    def slot_fields(self) -> dict:
        return {
            'area_slug': self.area_slug,
            'amenity_slug': self.amenity.slug,
            'title': f'Best {self.amenity.title} in {self.area_name}',
            'subtitle': self.amenity.description,
            'href': self.href,
            'icon': self.amenity.icon,
            'pub_count': self.pub_count,
            'score': round(self.score, 4),
            'is_seasonal': self.is_seasonal,
        }


def generate_candidates() -> list[Candidate]:
    """Area x amenity combinations that have enough pubs for a landing page."""
    candidates = []
    for area in list_areas(min_pubs=MIN_AREA_PUBS):
        pubs = area_pubs(area['name'])
        for amenity in AMENITY_FILTERS:
            matching = sum(1 for pub in pubs if pub_matches_amenity(pub, amenity))
            if matching >= MIN_AMENITY_PUBS:
                candidates.append(Candidate(
                    area_slug=area['slug'],
                    area_name=area['name'],
                    area_pub_count=area['pub_count'],
                    amenity=amenity,
                    pub_count=matching,
                ))
    return candidates


def list_candidates() -> list[dict]:
    """Candidates for the admin picker, most pubs first."""
    candidates = sorted(generate_candidates(), key=lambda c: c.pub_count, reverse=True)
    return [
        {
            'area_slug': c.area_slug,
            'amenity_slug': c.amenity_slug,
            'area_name': c.area_name,
            'amenity_title': c.amenity.title,
            'amenity_description': c.amenity.description,
            'pub_count': c.pub_count,
            'href': c.href,
            'icon': c.amenity.icon,
        }
        for c in candidates
    ]


def score_candidates(candidates: list[Candidate], *, signals: dict, month: int) -> list[Candidate]:
    """
    Score candidates from 7-day engagement, best first.

    Tile CTR is looked up through the stored slot for the same area and
    amenity; a candidate without one has no CTR yet.
    """
    slot_ids = {
        (area, amenity): str(slot_id)
        for slot_id, area, amenity in HomepageSlot.objects.values_list('id', 'area_slug', 'amenity_slug')
    }

    for candidate in candidates:
        tile = signals['tiles'].get(slot_ids.get((candidate.area_slug, candidate.amenity_slug)), {})
        impressions = tile.get('impressions', 0)
        ctr = tile.get('clicks', 0) / impressions if impressions else 0.0
        boost = seasonal_boost(candidate.amenity_slug, month)

        candidate.score = slot_score(
            ctr=ctr,
            views=signals['area_views'].get(candidate.area_slug, 0),
            bookings=signals['area_bookings'].get(candidate.area_slug, 0),
            pub_count=candidate.pub_count,
            seasonal=boost,
        )
        candidate.is_seasonal = boost > 0

    return sorted(candidates, key=lambda c: c.score, reverse=True)


def _activate(slot_fields: list[dict]) -> list[HomepageSlot]:
    """Deactivate every slot, then upsert and activate the given ones in order."""
    HomepageSlot.objects.filter(is_active=True).update(is_active=False)

    activated = []
    for position, fields in enumerate(slot_fields, start=1):
        fields = dict(fields)
        area_slug = fields.pop('area_slug')
        amenity_slug = fields.pop('amenity_slug')
        fields.setdefault('position', position)
        slot, _ = HomepageSlot.objects.update_or_create(
            area_slug=area_slug,
            amenity_slug=amenity_slug,
            defaults={**fields, 'is_active': True},
        )
        activated.append(slot)
    return activated


@transaction.atomic
def regenerate_slots(*, now=None) -> tuple[list[HomepageSlot], str]:
    """
    Rebuild the active homepage slots.

    Returns:
        Tuple of (active slots, source) where source is 'scored', or
        'fallback' when no area has enough pubs for a candidate
    """
    now = now or timezone.now()
    candidates = generate_candidates()

    if not candidates:
        logger.warning("No homepage slot candidates, using fallback slots")
        return _activate(FALLBACK_SLOTS), 'fallback'

    signals = AnalyticsQueries.slot_engagement(now - timedelta(days=ENGAGEMENT_DAYS))
    ranked = score_candidates(candidates, signals=signals, month=timezone.localtime(now).month)
    chosen = apply_diversity_rules(ranked)[:ACTIVE_SLOTS]

    slots = _activate([candidate.slot_fields() for candidate in chosen])
    logger.info("Homepage slots regenerated from %d candidates: %d active", len(candidates), len(slots))
    return slots, 'scored'


@transaction.atomic
def set_slots(*, slots: list[dict]) -> list[HomepageSlot]:
    """
    Replace the active slots with a hand-picked selection.

    Raises:
        InvalidSlotsError: If the same area and amenity appear twice
    """
    keys = [(slot['area_slug'], slot['amenity_slug']) for slot in slots]
    if len(keys) != len(set(keys)):
        raise InvalidSlotsError("Each area and amenity pair may appear only once")

    return _activate(slots)


def active_slots():
    return HomepageSlot.objects.filter(is_active=True).order_by('position', '-score')


def generated_tiles(*, month: Optional[int] = None) -> list[dict]:
    """
    Tiles built straight from pub data, for when no slot is active.

    Scored by the share of the area's pubs that match plus the seasonal
    boost; no engagement data is used.
    """
    month = month or timezone.localtime().month
    candidates = generate_candidates()
    for candidate in candidates:
        boost = seasonal_boost(candidate.amenity_slug, month)
        candidate.score = 0.5 + (candidate.pub_count / candidate.area_pub_count) * 0.3 + boost
        candidate.is_seasonal = boost > 0

    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    return [
        {
            'id': f'tile-{index}',
            'title': f'Best {c.amenity.title} in {c.area_name}',
            'subtitle': c.amenity.description,
            'href': c.href,
            'icon': c.amenity.icon,
            'city': c.area_name,
            'amenity': c.amenity.title,
            'pub_count': c.pub_count,
            'score': round(c.score, 4),
            'is_seasonal': c.is_seasonal,
        }
        for index, c in enumerate(apply_diversity_rules(ranked), start=1)
    ]
