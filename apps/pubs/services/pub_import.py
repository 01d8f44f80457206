"""
CSV import of Google Places exports.

Rows are upserted by Place ID. Rows without a Place ID that look like an
existing pub (same postcode, near-identical name) are reported instead of
imported twice.
"""

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from django.contrib.auth.hashers import make_password
from django.db import transaction
from fuzzywuzzy import fuzz

from ..models import City, Borough, Pub
from .exceptions import PubImportError

logger = logging.getLogger(__name__)

DEFAULT_CITY = 'London'
DUPLICATE_NAME_THRESHOLD = 90


@dataclass
class ImportReport:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    duplicates: list = field(default_factory=list)
    errors: list = field(default_factory=list)

    def as_dict(self):
        return {
            'created': self.created,
            'updated': self.updated,
            'skipped': self.skipped,
            'duplicates': self.duplicates,
            'errors': self.errors,
        }


def normalize_name(text: str) -> str:
    text = (text or '').lower().strip()
    text = re.sub(r'^the\s+', '', text)
    text = re.sub(r'\s+', ' ', text)
    return re.sub(r'[^\w\s-]', '', text)


def pub_type_from_types(types: str) -> str:
    """Map Google place ``types`` to a pub type."""
    types = (types or '').lower()
    if 'bar' in types and 'food' in types:
        return 'Gastro Pub'
    if 'bar' in types:
        return 'Modern'
    if 'restaurant' in types:
        return 'Food Pub'
    return 'Traditional'


def features_from_types(types: str) -> list[str]:
    types = (types or '').lower()
    features = []
    if 'food' in types:
        features.append('Food Served')
    if 'bar' in types:
        features.append('Bar')
    if 'establishment' in types:
        features.append('Licensed')
    return features


def _float_or_none(value) -> Optional[float]:
    try:
        return float(value) if value not in (None, '') else None
    except (TypeError, ValueError):
        return None


def _int_or_zero(value) -> int:
    try:
        return int(float(value)) if value not in (None, '') else 0
    except (TypeError, ValueError):
        return 0


def find_potential_duplicates(*, name: str, postcode: str, threshold: int = DUPLICATE_NAME_THRESHOLD) -> list[tuple[Pub, int]]:
    """
    Existing pubs at the same postcode whose names are fuzzily equal.

    Returns:
        List of (pub, similarity) tuples, best match first
    """
    if not postcode:
        return []
    normalized = normalize_name(name)
    matches = []
    for pub in Pub.objects.filter(postcode__iexact=postcode.strip()):
        similarity = fuzz.ratio(normalized, normalize_name(pub.name))
        if similarity >= threshold:
            matches.append((pub, similarity))
    return sorted(matches, key=lambda match: match[1], reverse=True)


def row_to_fields(row: dict, line_number: int) -> dict:
    """
    Translate one CSV row into Pub field values.

    Raises:
        PubImportError: If name or address is missing
    """
    name = (row.get('name') or '').strip()
    address = (row.get('address') or '').strip()
    if not name or not address:
        raise PubImportError(f"Row {line_number}: Missing required fields (name or address)")

    borough = (row.get('borough') or '').strip()
    types = row.get('types') or ''

    return {
        'name': name,
        'address': address,
        'borough_name': borough,
        'description': (row.get('summary') or '').strip() or (f"A great pub in {borough}" if borough else ''),
        'type': pub_type_from_types(types),
        'features': features_from_types(types),
        'rating': _float_or_none(row.get('rating')) or 0,
        'review_count': _int_or_zero(row.get('user_ratings_total') or row.get('review_count')),
        'postcode': (row.get('postcode') or '').strip(),
        'phone': (row.get('phone') or '').strip(),
        'website': (row.get('website') or '').strip(),
        'opening_hours': (row.get('opening_hours') or '').strip(),
        'lat': _float_or_none(row.get('lat')),
        'lng': _float_or_none(row.get('lng')),
        'photo_url': (row.get('photo_url') or '').strip(),
        'manager_email': (row.get('manager_email') or '').strip().lower(),
        'manager_password': (row.get('manager_password') or '').strip(),
    }


def _resolve_borough(city: City, name: str) -> Optional[Borough]:
    if not name:
        return None
    borough, _ = Borough.objects.get_or_create(city=city, name=name)
    return borough


@transaction.atomic
def import_pubs(*, rows: Iterable[dict], city_name: str = DEFAULT_CITY, dry_run: bool = False) -> ImportReport:
    """
    Upsert pubs from parsed CSV rows.

    Args:
        rows: Dict rows as produced by csv.DictReader
        city_name: City every imported pub belongs to
        dry_run: Validate and report without writing

    Returns:
        ImportReport with counts, duplicates and row errors
    """
    report = ImportReport()
    city, _ = City.objects.get_or_create(name=city_name)

    for index, row in enumerate(rows):
        line_number = index + 2  # header is line 1
        try:
            fields = row_to_fields(row, line_number)
        except PubImportError as e:
            report.errors.append(str(e))
            report.skipped += 1
            continue

        place_id = (row.get('place_id') or '').strip() or None
        existing = Pub.objects.filter(place_id=place_id).first() if place_id else None

        if existing is None:
            duplicates = find_potential_duplicates(name=fields['name'], postcode=fields['postcode'])
            if duplicates:
                pub, similarity = duplicates[0]
                report.duplicates.append({
                    'row': line_number,
                    'name': fields['name'],
                    'existing_id': str(pub.id),
                    'existing_name': pub.name,
                    'similarity': similarity,
                })
                report.skipped += 1
                continue

        if dry_run:
            if existing:
                report.updated += 1
            else:
                report.created += 1
            continue

        borough = _resolve_borough(city, fields.pop('borough_name'))
        password = fields.pop('manager_password')
        if password:
            fields['manager_password'] = make_password(password)
        if not fields['manager_email']:
            fields.pop('manager_email')

        if existing:
            for attr, value in fields.items():
                setattr(existing, attr, value)
            existing.city = city
            existing.borough = borough
            existing.save()
            report.updated += 1
        else:
            Pub.objects.create(place_id=place_id, city=city, borough=borough, **fields)
            report.created += 1

    logger.info(
        "Pub import finished: %d created, %d updated, %d skipped",
        report.created, report.updated, report.skipped,
    )
    return report


def read_csv_rows(csv_text: str) -> list[dict]:
    """Trimmed dict rows of CSV text (header row required), blank rows dropped."""
    reader = csv.DictReader(io.StringIO(csv_text.lstrip('\ufeff')))
    return [
        {(key or '').strip(): (value or '').strip() if isinstance(value, str) else value for key, value in row.items()}
        for row in reader
        if any((value or '').strip() for value in row.values() if isinstance(value, str))
    ]


def import_pubs_from_csv(*, csv_text: str, **kwargs) -> ImportReport:
    """Parse CSV text and import it."""
    return import_pubs(rows=read_csv_rows(csv_text), **kwargs)
