"""
Analytics write side: event ingestion, duplicate cleanup and the admin audit trail.

Events arrive in batches from the browser. Page views and filter usage are
high volume and bulk inserted; the rest are stored one at a time. Malformed
or unknown events are logged and skipped so one bad event never loses the
batch.
"""

import logging
import uuid
from datetime import timedelta

from django.db import transaction

from apps.pubs.models import Pub
from .exceptions import InvalidEventsError
from .models import (
    AdminAudit,
    CtaType,
    EventCtaClick,
    EventFilterUsage,
    EventHomepageTile,
    EventPageView,
    EventSearch,
    TileEventType,
)

logger = logging.getLogger(__name__)


def record_audit(*, actor, action: str, entity: str, entity_id='', diff=None) -> AdminAudit:
    """
    Append an entry to the admin audit log.

    Args:
        actor: Email of the admin or manager making the change
        action: Short verb, e.g. 'update' or 'add_manager'
        entity: Kind of object changed, e.g. 'pub'
        entity_id: Primary key of the changed object
        diff: JSON-serialisable description of the change
    """
    return AdminAudit.objects.create(
        actor=str(actor or 'unknown'),
        action=action,
        entity=entity,
        entity_id=str(entity_id or ''),
        diff=diff,
    )


def _text(value, max_length: int) -> str:
    if value is None:
        return ''
    return str(value).strip()[:max_length]


def _int_or_none(value):
    try:
        return int(value) if value not in (None, '') else None
    except (TypeError, ValueError):
        return None


def _resolve_pub_ids(raw_ids) -> dict:
    """Map raw pub identifiers (UUID or Place ID) to pub primary keys."""
    raw_ids = {str(value) for value in raw_ids if value}
    if not raw_ids:
        return {}

    uuids = []
    for value in raw_ids:
        try:
            uuids.append(uuid.UUID(value))
        except ValueError:
            pass

    resolved = {}
    for pub_id, place_id in Pub.objects.filter(place_id__in=raw_ids).values_list('id', 'place_id'):
        resolved[place_id] = pub_id
    for pub_id in Pub.objects.filter(id__in=uuids).values_list('id', flat=True):
        resolved[str(pub_id)] = pub_id
    return resolved


def _page_view(data: dict, user, pub_ids: dict):
    session_id = _text(data.get('session_id'), 100)
    if not session_id:
        return None
    utm = data.get('utm')
    return EventPageView(
        user=user,
        session_id=session_id,
        pub_id=pub_ids.get(str(data.get('pub_id') or '')),
        area_slug=_text(data.get('area_slug'), 100),
        ref=_text(data.get('ref'), 500),
        utm=utm if isinstance(utm, dict) else None,
        device=_text(data.get('device'), 20),
    )


def _filter_usage(data: dict):
    filter_key = _text(data.get('filter_key'), 100)
    if not filter_key:
        return None
    return EventFilterUsage(
        session_id=_text(data.get('session_id'), 100),
        filter_key=filter_key,
        city=_text(data.get('city'), 100),
        borough=_text(data.get('borough'), 100),
    )


def _store_search(data: dict, user) -> bool:
    query = _text(data.get('query'), 255)
    if not query:
        return False
    EventSearch.objects.create(
        user=user,
        session_id=_text(data.get('session_id'), 100),
        query=query,
        city=_text(data.get('city'), 100),
        borough=_text(data.get('borough'), 100),
        results_count=_int_or_none(data.get('results_count')),
    )
    return True


def _store_cta_click(data: dict, pub_ids: dict) -> bool:
    cta_type = data.get('type')
    if cta_type not in CtaType.values:
        return False
    pub_id = pub_ids.get(str(data.get('pub_id') or ''))
    if pub_id is None and cta_type not in (CtaType.SPIN, CtaType.SPIN_VIEW_PUB):
        return False
    EventCtaClick.objects.create(
        session_id=_text(data.get('session_id'), 100),
        pub_id=pub_id,
        type=cta_type,
    )
    return True


def _store_homepage_tile(data: dict) -> bool:
    slot_id = _text(data.get('slot_id'), 100)
    if data.get('type') not in TileEventType.values or not slot_id:
        return False
    EventHomepageTile.objects.create(
        session_id=_text(data.get('session_id'), 100),
        type=data['type'],
        slot_id=slot_id,
        title=_text(data.get('title'), 255),
        amenity=_text(data.get('amenity'), 100),
        city=_text(data.get('city'), 100),
        href=_text(data.get('href'), 500),
    )
    return True


@transaction.atomic
def ingest_events(*, events, user=None) -> int:
    """
    Store a batch of ``{"type": ..., "data": {...}}`` events.

    Args:
        events: List of events as posted by the browser
        user: Authenticated site user, attached to page views and searches

    Returns:
        Number of events received

    Raises:
        InvalidEventsError: If ``events`` is not a list
    """
    if not isinstance(events, list):
        raise InvalidEventsError("Events must be an array")

    if user is not None and not getattr(user, 'is_authenticated', False):
        user = None

    well_formed = [
        event for event in events
        if isinstance(event, dict) and isinstance(event.get('data'), dict)
    ]
    pub_ids = _resolve_pub_ids(
        event['data'].get('pub_id') for event in well_formed
        if event.get('type') in ('page_view', 'cta_click')
    )

    page_views, filter_usages = [], []
    skipped = len(events) - len(well_formed)

    for event in well_formed:
        event_type, data = event.get('type'), event['data']

        if event_type == 'page_view':
            row = _page_view(data, user, pub_ids)
            if row:
                page_views.append(row)
            else:
                skipped += 1
        elif event_type == 'filter_usage':
            row = _filter_usage(data)
            if row:
                filter_usages.append(row)
            else:
                skipped += 1
        elif event_type == 'search':
            stored = _store_search(data, user)
            skipped += 0 if stored else 1
        elif event_type == 'cta_click':
            stored = _store_cta_click(data, pub_ids)
            skipped += 0 if stored else 1
        elif event_type == 'homepage_tile':
            stored = _store_homepage_tile(data)
            skipped += 0 if stored else 1
        else:
            logger.warning("Unknown analytics event type: %s", event_type)
            skipped += 1

    if page_views:
        EventPageView.objects.bulk_create(page_views)
    if filter_usages:
        EventFilterUsage.objects.bulk_create(filter_usages)

    if skipped:
        logger.info("Skipped %d of %d analytics events", skipped, len(events))
    return len(events)


def find_duplicate_page_views() -> list:
    """
    IDs of page views repeating an earlier view of the same pub in the same session.

    The oldest view per (session, pub) is kept. Area page views carry no
    pub and are never duplicates.
    """
    seen = set()
    duplicates = []
    rows = (
        EventPageView.objects
        .filter(pub__isnull=False)
        .order_by('session_id', 'pub_id', 'ts', 'id')
        .values_list('id', 'session_id', 'pub_id')
    )
    for event_id, session_id, pub_id in rows.iterator():
        key = (session_id, pub_id)
        if key in seen:
            duplicates.append(event_id)
        else:
            seen.add(key)
    return duplicates


def find_duplicate_filter_usage(*, window_seconds: float = 1.0) -> list:
    """
    IDs of filter usage events fired again for the same filter within the window.

    Events are grouped by (session, filter key); an event within
    ``window_seconds`` of the last kept one is a duplicate.
    """
    window = timedelta(seconds=window_seconds)
    last_kept = {}
    duplicates = []
    rows = (
        EventFilterUsage.objects
        .order_by('session_id', 'filter_key', 'ts', 'id')
        .values_list('id', 'session_id', 'filter_key', 'ts')
    )
    for event_id, session_id, filter_key, ts in rows.iterator():
        key = (session_id, filter_key)
        kept_at = last_kept.get(key)
        if kept_at is not None and ts - kept_at <= window:
            duplicates.append(event_id)
        else:
            last_kept[key] = ts
    return duplicates


@transaction.atomic
def delete_events(*, model, ids, batch_size: int = 1000) -> int:
    """Delete events by primary key in batches. Returns the number deleted."""
    deleted = 0
    for start in range(0, len(ids), batch_size):
        count, _ = model.objects.filter(id__in=ids[start:start + batch_size]).delete()
        deleted += count
    logger.info("Deleted %d duplicate %s rows", deleted, model._meta.db_table)
    return deleted
