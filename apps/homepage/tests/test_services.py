import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace
from apps.analytics.models import EventHomepageTile, EventPageView
from apps.homepage.models import HomepageSlot
from apps.homepage.services import (
    FALLBACK_SLOTS,
    apply_diversity_rules,
    generate_candidates,
    generated_tiles,
    list_candidates,
    normalize,
    regenerate_slots,
    score_candidates,
    seasonal_boost,
    set_slots,
    slot_score,
    InvalidSlotsError,
)

JULY = datetime(2025, 7, 15, 12, 0, tzinfo=dt_timezone.utc)
JANUARY = datetime(2025, 1, 15, 12, 0, tzinfo=dt_timezone.utc)
NO_SIGNALS = {'tiles': {}, 'area_views': {}, 'area_bookings': {}}


def tile(area, amenity):
    return SimpleNamespace(area_slug=area, amenity_slug=amenity)


# =============================================================================
# Scoring
# =============================================================================

class TestScoring:

    @pytest.mark.parametrize('value,expected', [(-5, 0.0), (0, 0.0), (500, 0.5), (1000, 1.0), (5000, 1.0)])
    def test_normalize(self, value, expected):
        assert normalize(value, 0, 1000) == expected

    @pytest.mark.parametrize('amenity,month,boost', [
        ('beer-garden', 7, 0.2),
        ('rooftop', 6, 0.2),
        ('beer-garden', 4, 0.15),
        ('riverside', 3, 0.15),
        ('sunday-roast', 12, 0.2),
        ('open-late', 2, 0.2),
        ('sunday-roast', 7, 0.0),
        ('beer-garden', 10, 0.0),
        ('cocktails', 7, 0.0),
        (None, 7, 0.0),
    ])
    def test_seasonal_boost(self, amenity, month, boost):
        assert seasonal_boost(amenity, month) == boost

    def test_slot_score_weights(self):
        score = slot_score(ctr=0.1, views=500, bookings=25, pub_count=100, seasonal=0.2)
        assert score == pytest.approx(0.45 * 0.1 + 0.25 * 0.5 + 0.15 * 0.5 + 0.10 * 1.0 + 0.05 * 0.2)


class TestDiversityRules:

    def test_caps_per_area_and_amenity(self):
        ranked = [
            tile('camden', 'beer-garden'),
            tile('camden', 'cocktails'),
            tile('camden', 'pub-quiz'),
            tile('hackney', 'beer-garden'),
            tile('islington', 'beer-garden'),
            tile('soho', 'beer-garden'),
            tile('soho', 'live-music'),
        ]

        selected = apply_diversity_rules(ranked)

        assert ranked[2] not in selected
        assert ranked[5] not in selected
        assert ranked[6] in selected
        assert len(selected) == 5

    def test_at_most_twelve(self):
        ranked = [tile(f'area-{n}', f'amenity-{n}') for n in range(20)]
        assert len(apply_diversity_rules(ranked)) == 12

    def test_backfills_missing_amenities(self):
        ranked = [
            tile('camden', 'beer-garden'),
            tile('camden', 'dog-friendly'),
            tile('camden', 'sunday-roast'),
        ]

        selected = apply_diversity_rules(ranked)

        assert {t.amenity_slug for t in selected} == {'beer-garden', 'dog-friendly', 'sunday-roast'}


# =============================================================================
# Candidates
# =============================================================================

@pytest.mark.django_db
class TestCandidates:

    def test_areas_and_amenities_with_enough_pubs(self, camden_pubs, small_area_pubs):
        candidates = {(c.area_slug, c.amenity_slug): c.pub_count for c in generate_candidates()}

        assert candidates == {
            ('camden', 'beer-garden'): 4,
            ('camden', 'dog-friendly'): 4,
            ('camden', 'sunday-roast'): 3,
        }

    def test_list_for_admin(self, camden_pubs):
        candidates = list_candidates()

        assert candidates[0]['pub_count'] == 4
        assert candidates[-1]['amenity_slug'] == 'sunday-roast'
        assert candidates[-1]['href'] == '/area/camden/sunday-roast'
        assert candidates[-1]['area_name'] == 'Camden'

    def test_seasonal_ordering(self, camden_pubs):
        summer = score_candidates(generate_candidates(), signals=NO_SIGNALS, month=7)
        winter = score_candidates(generate_candidates(), signals=NO_SIGNALS, month=1)

        assert summer[0].amenity_slug == 'beer-garden'
        assert summer[0].is_seasonal is True
        assert winter[0].amenity_slug == 'sunday-roast'

    def test_ctr_from_existing_slot(self, camden_pubs, make_slot):
        slot = make_slot('camden', 'dog-friendly')
        signals = dict(NO_SIGNALS, tiles={str(slot.id): {'impressions': 10, 'clicks': 5}})

        ranked = score_candidates(generate_candidates(), signals=signals, month=7)

        assert ranked[0].amenity_slug == 'dog-friendly'
        assert ranked[0].score > 0.45 * 0.5


# =============================================================================
# Regeneration
# =============================================================================

@pytest.mark.django_db
class TestRegenerateSlots:

    def test_activates_scored_slots(self, camden_pubs, make_slot):
        stale = make_slot('soho', 'cocktails', position=1)

        slots, source = regenerate_slots(now=JULY)

        assert source == 'scored'
        assert [slot.position for slot in slots] == [1, 2, 3]
        assert slots[0].amenity_slug == 'beer-garden'
        assert slots[0].title == 'Best Beer garden in Camden'
        assert slots[0].href == '/area/camden/beer-garden'
        stale.refresh_from_db()
        assert stale.is_active is False
        assert HomepageSlot.objects.filter(is_active=True).count() == 3

    def test_updates_existing_slot(self, camden_pubs, make_slot):
        existing = make_slot('camden', 'sunday-roast', position=4, is_active=False)

        regenerate_slots(now=JANUARY)

        existing.refresh_from_db()
        assert existing.is_active is True
        assert existing.position == 1
        assert existing.is_seasonal is True

    def test_uses_recent_engagement(self, camden_pubs, make_slot):
        slot = make_slot('camden', 'dog-friendly')
        for _ in range(4):
            EventHomepageTile.objects.create(type='impression', slot_id=str(slot.id), ts=JULY - timedelta(days=1))
        EventHomepageTile.objects.create(type='click', slot_id=str(slot.id), ts=JULY - timedelta(days=1))
        # Outside the 7-day window
        EventHomepageTile.objects.create(type='click', slot_id=str(slot.id), ts=JULY - timedelta(days=30))

        slots, _ = regenerate_slots(now=JULY)

        assert slots[0].amenity_slug == 'dog-friendly'
        assert slots[0].score == pytest.approx(0.45 * 0.25 + 0.10 * (1 / 97), abs=1e-4)

    def test_area_views_count(self, camden_pubs):
        EventPageView.objects.create(session_id='s1', area_slug='camden', ts=JULY - timedelta(hours=2))

        slots, _ = regenerate_slots(now=JULY)

        assert min(slot.score for slot in slots) > 0

    def test_fallback_without_candidates(self, small_area_pubs):
        slots, source = regenerate_slots(now=JULY)

        assert source == 'fallback'
        assert len(slots) == len(FALLBACK_SLOTS) == 6
        assert slots[0].href == '/area/wandsworth/dog-friendly'
        assert [slot.position for slot in slots] == [1, 2, 3, 4, 5, 6]


@pytest.mark.django_db
class TestSetSlots:

    def test_replaces_active_slots(self, make_slot):
        old = make_slot('soho', 'cocktails')

        slots = set_slots(slots=[
            {'area_slug': 'camden', 'amenity_slug': 'pub-quiz', 'title': 'Quiz in Camden',
             'href': '/area/camden/pub-quiz'},
            {'area_slug': 'soho', 'amenity_slug': 'cocktails', 'title': 'Soho Cocktails',
             'href': '/area/soho/cocktails', 'position': 5},
        ])

        assert [(s.area_slug, s.position) for s in slots] == [('camden', 1), ('soho', 5)]
        old.refresh_from_db()
        assert old.is_active is True
        assert old.title == 'Soho Cocktails'
        assert HomepageSlot.objects.count() == 2

    def test_duplicate_pair(self):
        slot = {'area_slug': 'camden', 'amenity_slug': 'pub-quiz', 'title': 'Quiz', 'href': '/x'}

        with pytest.raises(InvalidSlotsError):
            set_slots(slots=[slot, dict(slot)])


@pytest.mark.django_db
class TestGeneratedTiles:

    def test_from_pub_data(self, camden_pubs):
        tiles = generated_tiles(month=7)

        assert [t['id'] for t in tiles] == ['tile-1', 'tile-2', 'tile-3']
        assert tiles[0]['amenity'] == 'Beer garden'
        assert tiles[0]['city'] == 'Camden'
        assert tiles[0]['score'] == pytest.approx(0.5 + 0.4 * 0.3 + 0.2)
        assert tiles[0]['is_seasonal'] is True

    def test_empty_without_candidates(self, db):
        assert generated_tiles(month=7) == []
