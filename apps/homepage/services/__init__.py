"""
Homepage services - Business logic layer.

This package contains all business operations for the homepage app:
- Area x amenity slot candidates
- Engagement-based slot scoring with seasonal boosts and diversity rules
- Manual slot selection and the public tile feed
"""

from .slots import (
    FALLBACK_SLOTS,
    Candidate,
    generate_candidates,
    list_candidates,
    score_candidates,
    regenerate_slots,
    set_slots,
    active_slots,
    generated_tiles,
)
from .scoring import normalize, seasonal_boost, slot_score, apply_diversity_rules

# Domain Exceptions
from .exceptions import HomepageServiceError, InvalidSlotsError

__all__ = [
    # Slots
    'FALLBACK_SLOTS',
    'Candidate',
    'generate_candidates',
    'list_candidates',
    'score_candidates',
    'regenerate_slots',
    'set_slots',
    'active_slots',
    'generated_tiles',
    # Scoring
    'normalize',
    'seasonal_boost',
    'slot_score',
    'apply_diversity_rules',
    # Exceptions
    'HomepageServiceError',
    'InvalidSlotsError',
]
