"""
TheSportsDB v2 client.

Every request carries the premium key in ``X-API-KEY``. Upstream failures
are logged and reported as empty results; callers decide whether that is
fatal.
"""

import logging
import time
from datetime import date
from typing import Optional

import requests
from django.conf import settings

from .exceptions import SportsDbNotConfiguredError

logger = logging.getLogger(__name__)

BASE_URL = 'https://www.thesportsdb.com/api/v2/json'
REQUEST_TIMEOUT = 10
DAY_DELAY_SECONDS = 1.0
LOOKUP_DELAY_SECONDS = 0.25


def api_key() -> str:
    """
    Raises:
        SportsDbNotConfiguredError: If THE_SPORTS_DB_API_KEY is empty
    """
    key = (settings.THE_SPORTS_DB_API_KEY or '').strip()
    if not key:
        raise SportsDbNotConfiguredError("THE_SPORTS_DB_API_KEY is required for V2 API (premium)")
    return key


def pause(seconds: float) -> None:
    if settings.THE_SPORTS_DB_THROTTLE:
        time.sleep(seconds)


def _get_json(path: str, key: str) -> Optional[dict]:
    """GET a v2 endpoint; None on network errors, non-2xx or bad JSON."""
    try:
        response = requests.get(
            f'{BASE_URL}/{path}',
            headers={'X-API-KEY': key},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.warning("TheSportsDB request %s failed: %s", path, e)
        return None

    if not response.ok:
        logger.warning("TheSportsDB %s returned %s", path, response.status_code)
        return None

    if not response.text.strip():
        return None
    try:
        data = response.json()
    except ValueError:
        logger.warning("TheSportsDB %s returned invalid JSON", path)
        return None
    return data if isinstance(data, dict) else None


def tv_schedule(day: date, *, key: str) -> list[dict]:
    """Televised events on one day (``/filter/tv/day/{date}``)."""
    data = _get_json(f'filter/tv/day/{day.isoformat()}', key)
    items = (data or {}).get('filter')
    return items if isinstance(items, list) else []


def event_details(event_id: str, *, key: str) -> dict:
    """
    League, sport and country of one event; the TV schedule lacks them.

    Returns:
        dict with league, sport and country, each possibly None
    """
    data = _get_json(f'lookup/event/{event_id}', key)
    items = (data or {}).get('lookup')
    first = items[0] if isinstance(items, list) and items else {}

    def clean(field):
        value = first.get(field) if isinstance(first, dict) else None
        return (value.strip() or None) if isinstance(value, str) else None

    return {
        'league': clean('strLeague'),
        'sport': clean('strSport'),
        'country': clean('strCountry'),
    }


def soccer_livescores(*, key: str) -> list[dict]:
    data = _get_json('livescore/soccer', key) or {}
    for field in ('events', 'livescores'):
        if isinstance(data.get(field), list):
            return data[field]
    return []
