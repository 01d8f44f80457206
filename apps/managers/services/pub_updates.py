"""Manager edits to their own pub listing."""

import logging
import re

from django.db import transaction
from django.utils import timezone

from apps.pubs.models import Amenity, PubAmenity
from .access import PubManagerSession, resolve_managed_pub
from .exceptions import InvalidManagerRequestError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'description', 'phone', 'website', 'opening_hours')


def amenity_key(value: str) -> str:
    """``'Beer Garden'`` -> ``'beer-garden'``."""
    return re.sub(r'\s+', '-', str(value).strip().lower())


@transaction.atomic
def update_managed_pub(*, session: PubManagerSession, updates: dict, pub_id=None):
    """
    Apply a manager's edits to a pub they manage.

    Only name, description, phone, website, opening_hours and amenities are
    applied; anything else is ignored. ``amenities`` replaces the pub's
    amenity rows with the known amenities among the given keys or labels.

    Returns:
        Updated Pub

    Raises:
        InvalidManagerRequestError: If a value has the wrong type
        PubAccessDeniedError: If ``pub_id`` is not managed by the caller
    """
    from apps.analytics.services import record_audit

    pub = resolve_managed_pub(session=session, pub_id=pub_id)
    diff = {}

    for field in EDITABLE_FIELDS:
        if field not in updates or updates[field] is None:
            continue
        value = updates[field]
        if not isinstance(value, str):
            raise InvalidManagerRequestError(f"{field} must be a string")
        value = value.strip()
        if field == 'name' and not value:
            raise InvalidManagerRequestError("name cannot be empty")
        setattr(pub, field, value)
        diff[field] = value

    if 'amenities' in updates and updates['amenities'] is not None:
        requested = updates['amenities']
        if not isinstance(requested, list):
            raise InvalidManagerRequestError("amenities must be a list")
        keys = {amenity_key(item) for item in requested if str(item).strip()}
        amenities = list(Amenity.objects.filter(key__in=keys))
        PubAmenity.objects.filter(pub=pub).delete()
        PubAmenity.objects.bulk_create([PubAmenity(pub=pub, amenity=amenity) for amenity in amenities])
        diff['amenities'] = sorted(amenity.key for amenity in amenities)

    pub.last_updated = timezone.now()
    pub.updated_by = session.email
    pub.save()

    record_audit(actor=session.email, action='update', entity='pub', entity_id=pub.id, diff=diff)
    logger.info("Pub %s updated by manager %s: %s", pub.id, session.email, ', '.join(diff) or 'no changes')
    return pub
