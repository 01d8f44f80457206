"""
Google Places photo proxy.

Photos are fetched server side so the API key never reaches the browser,
and served with long-lived cache headers so an edge cache absorbs repeat
requests. Two upstreams are supported: the legacy Places Photo API
(``photo_reference``) and the Places API (New) media endpoint (photo
``name``).
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse, parse_qs

import requests
from django.conf import settings
from django.core.cache import cache

from .exceptions import PhotoFetchError

logger = logging.getLogger(__name__)

LEGACY_PHOTO_URL = 'https://maps.googleapis.com/maps/api/place/photo'
PLACES_API_URL = 'https://places.googleapis.com/v1'

MIN_WIDTH = 64
MAX_IMAGE_BYTES = 5 * 1024 * 1024
REQUEST_TIMEOUT = 8
USER_AGENT = 'pubclub-photo-proxy/1.0'
STALE_WHILE_REVALIDATE = 86400
PLACE_PHOTO_CACHE_SECONDS = 24 * 60 * 60
FALLBACK_CACHE_SECONDS = 3600

# Sentinel cached for places without photos so misses are cached too
NO_PHOTO = '__none__'

FALLBACK_SVG = (
    b'<svg width="480" height="320" xmlns="http://www.w3.org/2000/svg">'
    b'<rect width="480" height="320" fill="#08d78c" opacity="0.2"/>'
    b'<text x="240" y="175" font-family="Arial" font-size="48" text-anchor="middle" '
    b'fill="#08d78c">Pub Club</text></svg>'
)


@dataclass
class PhotoResult:
    content: bytes
    content_type: str
    source: str
    width: int = 0
    headers: dict = field(default_factory=dict)


def clamp_width(raw: Optional[str]) -> int:
    """Parse the ``w`` parameter, defaulting and clamping to the allowed range."""
    try:
        width = int(raw) if raw not in (None, '') else settings.PHOTO_CACHE_MAXWIDTH_DEFAULT
    except (TypeError, ValueError):
        width = settings.PHOTO_CACHE_MAXWIDTH_DEFAULT
    return max(MIN_WIDTH, min(width, settings.PHOTO_CACHE_MAXWIDTH_MAX))


def width_candidates(requested: int) -> list[int]:
    """Requested width first, then progressively smaller fallbacks."""
    candidates = []
    for width in (requested, max(MIN_WIDTH, math.floor(requested * 0.75)), 320, 240, 160):
        if MIN_WIDTH <= width <= settings.PHOTO_CACHE_MAXWIDTH_MAX and width not in candidates:
            candidates.append(width)
    return candidates


def extract_photo_reference(value: str) -> str:
    """Accept either a bare reference or a full Places photo URL."""
    if '://' not in value:
        return value
    query = parse_qs(urlparse(value).query)
    if query.get('photo_reference'):
        return query['photo_reference'][0]
    match = re.search(r'photo_reference=([^&]+)', value)
    return match.group(1) if match else value


def cache_headers(ttl: int) -> dict:
    return {
        'Cache-Control': (
            f'public, max-age={ttl}, s-maxage={ttl}, '
            f'stale-while-revalidate={STALE_WHILE_REVALIDATE}'
        ),
    }


def _api_key() -> str:
    key = settings.GOOGLE_MAPS_API_KEY
    if not key:
        raise PhotoFetchError("Google Maps API key is not configured", status=500)
    return key


def _fetch_image(url: str, params: dict, headers: Optional[dict] = None) -> requests.Response:
    request_headers = {'User-Agent': USER_AGENT, 'Accept': 'image/*'}
    request_headers.update(headers or {})
    try:
        return requests.get(url, params=params, headers=request_headers, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        logger.warning("Photo upstream request failed: %s", e)
        raise PhotoFetchError("Failed to fetch photo from Google Places API", status=504)


def _validate_image(response: requests.Response) -> tuple[bytes, str]:
    content_type = response.headers.get('Content-Type', 'image/jpeg')
    if not content_type.startswith('image/'):
        raise PhotoFetchError("Invalid content type from Google Places API", status=502)

    declared = response.headers.get('Content-Length')
    if declared and declared.isdigit() and int(declared) > MAX_IMAGE_BYTES:
        raise PhotoFetchError("Image too large", status=413)

    content = response.content
    if len(content) > MAX_IMAGE_BYTES:
        raise PhotoFetchError("Image too large", status=413)
    return content, content_type


def fetch_photo_by_reference(*, reference: str, width: int) -> PhotoResult:
    """
    Fetch a photo through the legacy Places Photo API.

    Raises:
        PhotoFetchError: With the status the proxy should return
    """
    response = _fetch_image(
        LEGACY_PHOTO_URL,
        params={'photo_reference': reference, 'maxwidth': width, 'key': _api_key()},
    )
    if not response.ok:
        logger.warning("Legacy photo API returned %s", response.status_code)
        raise PhotoFetchError(
            f"Google Places Photo API error: {response.status_code}",
            status=response.status_code,
        )

    content, content_type = _validate_image(response)
    headers = {}
    if response.headers.get('X-Attribution'):
        headers['X-Attribution'] = response.headers['X-Attribution']
    return PhotoResult(
        content=content,
        content_type=content_type,
        source='google-places-legacy',
        width=width,
        headers=headers,
    )


def check_photo_reference(*, reference: str) -> bool:
    """
    Whether a legacy reference still resolves to an image.

    Raises:
        PhotoFetchError: If the API key is missing
    """
    try:
        response = _fetch_image(
            LEGACY_PHOTO_URL,
            params={'photo_reference': reference, 'maxwidth': MIN_WIDTH, 'key': _api_key()},
        )
    except PhotoFetchError as e:
        if e.status == 500:
            raise
        return False
    return response.ok and response.headers.get('Content-Type', '').startswith('image/')


def fetch_photo_by_name(*, photo_name: str, width: int) -> PhotoResult:
    """
    Fetch a photo through the Places API (New), stepping down widths.

    403/404 answers, non-image bodies and oversized images move on to the
    next candidate width.

    Raises:
        PhotoFetchError: When no candidate width produced an image
    """
    key = _api_key()
    candidates = width_candidates(width)
    for index, candidate in enumerate(candidates):
        try:
            response = _fetch_image(
                f'{PLACES_API_URL}/{photo_name}/media',
                params={'maxWidthPx': candidate, 'key': key},
            )
        except PhotoFetchError:
            if index == len(candidates) - 1:
                raise
            continue

        if not response.ok:
            if response.status_code in (403, 404):
                continue
            raise PhotoFetchError(
                f"Google Places Photo API error: {response.status_code}",
                status=response.status_code,
            )

        try:
            content, content_type = _validate_image(response)
        except PhotoFetchError:
            continue

        return PhotoResult(
            content=content,
            content_type=content_type,
            source='google-places-api-new',
            width=candidate,
        )

    raise PhotoFetchError("Unable to fetch photo from Google Places API", status=502)


def get_place_photo_name(*, place_id: str) -> Optional[str]:
    """
    First photo name of a place, cached for a day (misses included).

    Photo names expire upstream, so they are cached rather than stored.
    """
    cache_key = f'place-photo-name:{place_id}'
    cached = cache.get(cache_key)
    if cached is not None:
        return None if cached == NO_PHOTO else cached

    try:
        response = requests.get(
            f'{PLACES_API_URL}/places/{place_id}',
            params={'fields': 'photos'},
            headers={'X-Goog-Api-Key': _api_key(), 'User-Agent': USER_AGENT},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.warning("Place details lookup failed for %s: %s", place_id, e)
        return None

    photo_name = None
    if response.ok:
        try:
            photos = response.json().get('photos') or []
        except ValueError:
            photos = []
        if photos:
            photo_name = photos[0].get('name')
    else:
        logger.warning("Place details lookup for %s returned %s", place_id, response.status_code)

    cache.set(cache_key, photo_name or NO_PHOTO, PLACE_PHOTO_CACHE_SECONDS)
    return photo_name


def fallback_photo() -> PhotoResult:
    return PhotoResult(
        content=FALLBACK_SVG,
        content_type='image/svg+xml',
        source='fallback',
        headers={'Cache-Control': f'public, max-age={FALLBACK_CACHE_SECONDS}, s-maxage={FALLBACK_CACHE_SECONDS}'},
    )


def _photo_from_place(place_id: str, width: int) -> PhotoResult:
    name = get_place_photo_name(place_id=place_id)
    if not name:
        raise PhotoFetchError(f"No photos for place {place_id}", status=404)
    return fetch_photo_by_name(photo_name=name, width=width)


def fetch_photo_for_place(
    *,
    reference: Optional[str] = None,
    photo_name: Optional[str] = None,
    place_id: Optional[str] = None,
    width: int,
) -> PhotoResult:
    """
    Resolve the best photo for a pub, never failing.

    Tries ``reference`` (legacy), then ``photo_name`` (new API), then looks
    up the place's first photo. A failing source falls through to the next;
    the fallback placeholder is served only when every source failed.
    """
    if not settings.GOOGLE_MAPS_API_KEY:
        return fallback_photo()

    if reference:
        try:
            return fetch_photo_by_reference(reference=extract_photo_reference(reference), width=width)
        except PhotoFetchError as e:
            logger.info("Photo reference failed, trying next source: %s", e)

    if photo_name:
        try:
            return fetch_photo_by_name(photo_name=photo_name, width=width)
        except PhotoFetchError as e:
            logger.info("Photo name failed, trying next source: %s", e)

    if place_id:
        try:
            return _photo_from_place(place_id, width)
        except PhotoFetchError as e:
            logger.info("Place photo lookup failed: %s", e)

    return fallback_photo()
