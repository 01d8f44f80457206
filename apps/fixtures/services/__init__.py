"""
Fixtures services - Business logic layer.

This package contains all business operations for the fixtures app:
- Refreshing televised UK fixtures from TheSportsDB
- Channel mapping onto the site's TV vibes
- Upcoming fixtures and live scores for the homepage
"""

from .channels import Channel, channel_from_broadcast, ALLOWED_CHANNELS
from .fixtures import (
    parse_start,
    fixture_from_item,
    collect_fixtures,
    enrich_fixtures,
    refresh_fixtures,
    clear_fixtures,
    upcoming_fixtures,
    live_scores,
)

# Domain Exceptions
from .exceptions import (
    FixturesServiceError,
    SportsDbNotConfiguredError,
)

__all__ = [
    # Channels
    'Channel',
    'channel_from_broadcast',
    'ALLOWED_CHANNELS',
    # Fixtures
    'parse_start',
    'fixture_from_item',
    'collect_fixtures',
    'enrich_fixtures',
    'refresh_fixtures',
    'clear_fixtures',
    'upcoming_fixtures',
    'live_scores',
    # Exceptions
    'FixturesServiceError',
    'SportsDbNotConfiguredError',
]
