"""Slug helpers shared by pub, area and blog URLs."""

import re
from typing import Optional

PLACE_ID_PATTERN = re.compile(r'(ChIJ[a-zA-Z0-9_-]+)')


def generate_slug(text: str) -> str:
    """
    Turn free text into a URL slug.

    Lowercases, drops everything except word characters, whitespace and
    hyphens, replaces whitespace runs with a hyphen, then collapses and
    trims hyphens.

    Args:
        text: Text to slugify

    Returns:
        Slug, possibly empty
    """
    slug = (text or '').lower()
    slug = re.sub(r'[^\w\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def pub_slug(name: str, identifier: str) -> str:
    """Slug for a pub page: name slug followed by a URL-safe identifier."""
    safe_identifier = re.sub(r'[^\w-]', '-', identifier or '')
    name_part = generate_slug(name)
    if not name_part:
        return safe_identifier
    return f"{name_part}-{safe_identifier}"


def extract_place_id(slug: str) -> Optional[str]:
    """Pull a Google Place ID (``ChIJ...``) out of a pub slug, if present."""
    match = PLACE_ID_PATTERN.search(slug or '')
    return match.group(1) if match else None
