"""
CSV import of pub amenities.

The file is a grid: a ``place_id`` column (``borough`` is ignored) and one
column per amenity label holding a boolean. Each listed pub's amenity rows
are replaced by the columns marked true.
"""

import logging
from dataclasses import dataclass, field

from django.db import transaction

from ..models import Amenity, Pub, PubAmenity
from .exceptions import PubImportError
from .pub_import import read_csv_rows
from .slugs import generate_slug

logger = logging.getLogger(__name__)

NON_AMENITY_COLUMNS = frozenset({'place_id', 'borough'})
TRUE_VALUES = frozenset({'true', '1', 'yes', 'y'})


@dataclass
class AmenityImportReport:
    updated_pubs: int = 0
    skipped_pubs: int = 0
    links_created: int = 0
    amenities: list = field(default_factory=list)
    unknown_place_ids: list = field(default_factory=list)

    def as_dict(self):
        return {
            'updated_pubs': self.updated_pubs,
            'skipped_pubs': self.skipped_pubs,
            'links_created': self.links_created,
            'amenities': self.amenities,
            'unknown_place_ids': self.unknown_place_ids,
        }


def is_true(value) -> bool:
    return str(value or '').strip().lower() in TRUE_VALUES


def amenity_columns(rows: list[dict]) -> list[str]:
    """Amenity labels, in column order, from the header of parsed rows."""
    if not rows:
        return []
    return [column for column in rows[0] if column and column not in NON_AMENITY_COLUMNS]


@transaction.atomic
def import_amenities(*, rows: list[dict]) -> AmenityImportReport:
    """
    Replace the amenities of every pub listed in ``rows``.

    Raises:
        PubImportError: If there are no rows, no ``place_id`` column or no
            amenity columns
    """
    if not rows:
        raise PubImportError("CSV file is empty or invalid")
    if 'place_id' not in rows[0]:
        raise PubImportError("CSV must have a place_id column")

    labels = amenity_columns(rows)
    if not labels:
        raise PubImportError("No amenity columns found; use the pub upload for pub data")

    amenities = {}
    for label in labels:
        key = generate_slug(label)
        if not key:
            continue
        amenities[label], _ = Amenity.objects.get_or_create(key=key, defaults={'label': label})

    report = AmenityImportReport(amenities=list(amenities))
    pubs = Pub.objects.in_bulk(
        [row['place_id'] for row in rows if row.get('place_id')],
        field_name='place_id',
    )

    for row in rows:
        pub = pubs.get(row.get('place_id'))
        if pub is None:
            report.skipped_pubs += 1
            if row.get('place_id'):
                report.unknown_place_ids.append(row['place_id'])
            continue

        selected = {amenities[label].id: amenities[label] for label in amenities if is_true(row.get(label))}
        PubAmenity.objects.filter(pub=pub).delete()
        PubAmenity.objects.bulk_create([PubAmenity(pub=pub, amenity=amenity) for amenity in selected.values()])
        report.updated_pubs += 1
        report.links_created += len(selected)

    logger.info(
        "Amenity import finished: %d pubs updated, %d skipped, %d links",
        report.updated_pubs, report.skipped_pubs, report.links_created,
    )
    return report


def import_amenities_from_csv(*, csv_text: str) -> AmenityImportReport:
    return import_amenities(rows=read_csv_rows(csv_text))
