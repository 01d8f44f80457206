"""Televised fixtures: the cron refresh and the public read side."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone as dt_timezone
from typing import Optional

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime, parse_time

from apps.fixtures.models import UpcomingFixture
from . import sportsdb
from .channels import channel_from_broadcast
from .exceptions import SportsDbNotConfiguredError

logger = logging.getLogger(__name__)

DAYS_TO_FETCH = 14
MAX_FIXTURES_TO_STORE = 250
UK_BROADCAST_COUNTRIES = frozenset({'United Kingdom', 'UK'})


@dataclass
class FixtureRow:
    external_id: str
    event_id: str
    name: Optional[str]
    sport: Optional[str]
    league: Optional[str]
    image_url: Optional[str]
    starting_at: datetime
    channel_slug: Optional[str]
    channel_name: str
    channel_link: str
    country: Optional[str] = None

    def as_model(self) -> UpcomingFixture:
        return UpcomingFixture(**self.__dict__)


@dataclass
class RefreshReport:
    fixtures: list = field(default_factory=list)
    empty_days: int = 0


def _aware(value: datetime) -> datetime:
    if timezone.is_naive(value):
        return value.replace(tzinfo=dt_timezone.utc)
    return value


def parse_start(item: dict) -> Optional[datetime]:
    """
    Kick-off time of a schedule item, in UTC when no offset is given.

    Tries ``strTimeStamp``, then ``dateEvent`` + ``strTime``, then the
    bare date at midnight.
    """
    stamp = (item.get('strTimeStamp') or '').strip()
    if stamp:
        try:
            parsed = parse_datetime(stamp.replace(' ', 'T'))
        except ValueError:
            parsed = None
        if parsed:
            return _aware(parsed)

    try:
        day = parse_date((item.get('dateEvent') or '').strip())
    except ValueError:
        day = None
    if day is None:
        return None

    try:
        kick_off = parse_time((item.get('strTime') or '').strip())
    except ValueError:
        kick_off = None
    return _aware(datetime.combine(day, kick_off or time.min))


def _text(value) -> Optional[str]:
    return (value.strip() or None) if isinstance(value, str) else None


def fixture_from_item(item: dict, *, now: datetime) -> Optional[FixtureRow]:
    """
    Turn one TV schedule item into a fixture, or None when it is skipped.

    Skipped: non-UK broadcasts, past or undated events and channels
    outside the allowed list.
    """
    country = (item.get('strCountry') or '').strip()
    if country not in UK_BROADCAST_COUNTRIES:
        return None

    starting_at = parse_start(item)
    if starting_at is None or starting_at < now:
        return None

    channel = channel_from_broadcast(item.get('strChannel'), item.get('strEvent'))
    if not channel.is_allowed:
        return None

    event_id = str(
        item.get('idEvent') or item.get('id') or
        f"{item.get('strEvent')}-{item.get('dateEvent')}-{item.get('strTime')}"
    )
    return FixtureRow(
        external_id=f"{event_id}-{item.get('strChannel') or ''}-{item.get('strCountry') or ''}",
        event_id=event_id,
        name=item.get('strEvent'),
        sport=_text(item.get('strSport')),
        league=_text(item.get('strLeague')),
        image_url=_text(item.get('strEventThumb')),
        starting_at=starting_at,
        channel_slug=channel.slug,
        channel_name=channel.name,
        channel_link=channel.link,
    )


def collect_fixtures(*, key: str, start_day=None, now=None) -> RefreshReport:
    """Walk the TV schedule for DAYS_TO_FETCH days, de-duplicating broadcasts."""
    now = now or timezone.now()
    start_day = start_day or now.date()
    report = RefreshReport()
    seen = set()

    for offset in range(DAYS_TO_FETCH):
        day = start_day + timedelta(days=offset)
        items = sportsdb.tv_schedule(day, key=key)
        if not items:
            report.empty_days += 1

        for item in items:
            if not isinstance(item, dict):
                continue
            row = fixture_from_item(item, now=now)
            if row is None or row.external_id in seen:
                continue
            seen.add(row.external_id)
            report.fixtures.append(row)

        if offset < DAYS_TO_FETCH - 1:
            sportsdb.pause(sportsdb.DAY_DELAY_SECONDS)

    return report


def enrich_fixtures(fixtures: list[FixtureRow], *, key: str) -> None:
    """Fill league, sport and country from one event lookup per event."""
    details = {}
    for event_id in dict.fromkeys(row.event_id for row in fixtures):
        details[event_id] = sportsdb.event_details(event_id, key=key)
        sportsdb.pause(sportsdb.LOOKUP_DELAY_SECONDS)

    for row in fixtures:
        detail = details.get(row.event_id, {})
        for attr in ('league', 'sport', 'country'):
            if detail.get(attr) is not None:
                setattr(row, attr, detail[attr])


def refresh_fixtures() -> int:
    """
    Replace the stored fixtures with the next two weeks of UK TV sport.

    Returns:
        Number of fixtures stored (at most MAX_FIXTURES_TO_STORE, earliest first)

    Raises:
        SportsDbNotConfiguredError: If no API key is configured
    """
    key = sportsdb.api_key()
    report = collect_fixtures(key=key)
    enrich_fixtures(report.fixtures, key=key)

    keep = sorted(report.fixtures, key=lambda row: row.starting_at)[:MAX_FIXTURES_TO_STORE]
    with transaction.atomic():
        UpcomingFixture.objects.all().delete()
        UpcomingFixture.objects.bulk_create([row.as_model() for row in keep])

    logger.info(
        "Fixtures refreshed: %d stored, %d found, %d empty days",
        len(keep), len(report.fixtures), report.empty_days,
    )
    return len(keep)


def clear_fixtures() -> int:
    count, _ = UpcomingFixture.objects.all().delete()
    logger.info("Cleared %d fixtures", count)
    return count


def upcoming_fixtures(*, channel: Optional[str] = None, limit: int = 50):
    """Stored fixtures that have not started, optionally for one channel slug or name."""
    queryset = UpcomingFixture.objects.filter(starting_at__gte=timezone.now()).order_by('starting_at')
    if channel:
        queryset = queryset.filter(Q(channel_slug=channel) | Q(channel_name__iexact=channel))
    return queryset[:limit]


def _score(value) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def live_scores() -> dict:
    """
    Live football scores keyed by event ID.

    Never raises: no key or an upstream failure gives an empty dict.
    """
    try:
        key = sportsdb.api_key()
    except SportsDbNotConfiguredError:
        return {}

    scores = {}
    for event in sportsdb.soccer_livescores(key=key):
        if not isinstance(event, dict) or event.get('idEvent') is None:
            continue
        scores[str(event['idEvent'])] = {
            'home_score': _score(event.get('intHomeScore')),
            'away_score': _score(event.get('intAwayScore')),
            'progress': event.get('strProgress'),
        }
    return scores
