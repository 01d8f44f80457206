"""
Pubs services - Business logic layer.

This package contains all business operations for the pubs app:
- Pub lookup and search
- Weighted random pub selection
- Area and amenity landing pages
- Search suggestions
- Google Places photo proxy
- CSV import of pubs and amenity grids
"""

from .pub_lookup import get_pub, pub_queryset
from .pub_search import search_pubs, price_range_for_rating, parse_csv_list
from .random_selection import (
    RandomPubFilters,
    parse_search_selections,
    pub_weight,
    get_candidates,
    pick_random_pub,
)
from .areas import (
    list_areas,
    get_area,
    get_area_pubs_page,
    get_area_amenity_page,
)
from .amenity_filters import AMENITY_FILTERS, get_amenity_filter, pub_matches_amenity
from .suggestions import get_suggestions
from .photo_proxy import (
    clamp_width,
    cache_headers,
    fetch_photo_by_reference,
    fetch_photo_for_place,
)
from .pub_import import import_pubs, import_pubs_from_csv
from .amenity_import import import_amenities, import_amenities_from_csv

# Domain Exceptions
from .exceptions import (
    PubsServiceError,
    PubNotFoundError,
    AreaNotFoundError,
    AmenityFilterNotFoundError,
    InvalidFilterError,
    NoPubsMatchError,
    NoPubsAfterExclusionsError,
    PubImportError,
    PhotoFetchError,
)

__all__ = [
    # Lookup & search
    'get_pub',
    'pub_queryset',
    'search_pubs',
    'price_range_for_rating',
    'parse_csv_list',
    # Random selection
    'RandomPubFilters',
    'parse_search_selections',
    'pub_weight',
    'get_candidates',
    'pick_random_pub',
    # Areas
    'list_areas',
    'get_area',
    'get_area_pubs_page',
    'get_area_amenity_page',
    'AMENITY_FILTERS',
    'get_amenity_filter',
    'pub_matches_amenity',
    'get_suggestions',
    # Photos
    'clamp_width',
    'cache_headers',
    'fetch_photo_by_reference',
    'fetch_photo_for_place',
    # Import
    'import_pubs',
    'import_pubs_from_csv',
    'import_amenities',
    'import_amenities_from_csv',
    # Exceptions
    'PubsServiceError',
    'PubNotFoundError',
    'AreaNotFoundError',
    'AmenityFilterNotFoundError',
    'InvalidFilterError',
    'NoPubsMatchError',
    'NoPubsAfterExclusionsError',
    'PubImportError',
    'PhotoFetchError',
]
