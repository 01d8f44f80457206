"""
Amenity filters behind the ``/area/{area}/{amenity}`` landing pages.

A pub matches a filter when one of its amenity labels or features
contains any of the filter's search terms (case-insensitive).
"""

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class AmenityFilter:
    slug: str
    title: str
    description: str
    search_terms: tuple
    icon: str = '🍺'

    def matches(self, labels: Iterable[str]) -> bool:
        lowered = [label.lower() for label in labels if label]
        return any(term in label for label in lowered for term in self.search_terms)


AMENITY_FILTERS = (
    AmenityFilter(
        slug='sunday-roast',
        title='Sunday roast',
        description='Traditional Sunday roasts with all the trimmings',
        search_terms=('sunday roast', 'roast dinner', 'sunday lunch', 'roast beef', 'yorkshire pudding'),
        icon='🍖',
    ),
    AmenityFilter(
        slug='dog-friendly',
        title='Dog-friendly',
        description='Pubs that welcome dogs',
        search_terms=('dog friendly', 'dogs welcome', 'pet friendly', 'canine', 'pets allowed'),
        icon='🐕',
    ),
    AmenityFilter(
        slug='beer-garden',
        title='Beer garden',
        description='Pubs with outdoor beer gardens',
        search_terms=('beer garden', 'outdoor seating', 'garden', 'patio', 'terrace', 'outdoor area'),
        icon='🌳',
    ),
    AmenityFilter(
        slug='sky-sports',
        title='Sky Sports',
        description='Pubs showing Sky Sports',
        search_terms=('sky sports', 'sports', 'football', 'premier league', 'sports bar', 'big screen'),
        icon='📺',
    ),
    AmenityFilter(
        slug='tnt-sports',
        title='TNT Sports',
        description='Pubs showing TNT Sports',
        search_terms=('tnt sports', 'bt sport', 'sports', 'football', 'premier league', 'sports bar', 'big screen'),
        icon='📺',
    ),
    AmenityFilter(
        slug='terrestrial-tv',
        title='Terrestrial TV',
        description='Pubs showing Terrestrial TV (BBC, ITV, Channel 4)',
        search_terms=('six nations', 'bbc', 'itv', 'terrestrial', 'channel 4', 'free to air'),
        icon='📺',
    ),
    AmenityFilter(
        slug='bottomless-brunch',
        title='Bottomless brunch',
        description='Bottomless brunch experiences',
        search_terms=('bottomless brunch', 'brunch', 'bottomless', 'unlimited drinks', 'brunch deal'),
        icon='🥂',
    ),
    AmenityFilter(
        slug='cocktails',
        title='Cocktails',
        description='Pubs with great cocktail menus',
        search_terms=('cocktails', 'cocktail', 'mixology', 'craft cocktails', 'specialty drinks'),
        icon='🍸',
    ),
    AmenityFilter(
        slug='pub-quiz',
        title='Pub quiz',
        description='Pubs with regular quiz nights',
        search_terms=('pub quiz', 'quiz night', 'trivia', 'quiz', 'trivia night'),
        icon='🧠',
    ),
    AmenityFilter(
        slug='live-music',
        title='Live music',
        description='Pubs with live music events',
        search_terms=('live music', 'live band', 'music', 'entertainment', 'acoustic', 'gig'),
        icon='🎵',
    ),
    AmenityFilter(
        slug='real-ale-craft-beer',
        title='Real ale & craft beer',
        description='Pubs specializing in real ale and craft beer',
        search_terms=('real ale', 'craft beer', 'microbrewery', 'local beer', 'ale', 'brewery', 'cask ale'),
        icon='🍺',
    ),
    AmenityFilter(
        slug='pool-table-darts',
        title='Pool tables & darts',
        description='Pubs with pool tables and darts',
        search_terms=('pool table', 'darts', 'pool', 'dartboard', 'games', 'snooker'),
        icon='🎯',
    ),
)

AMENITY_FILTERS_BY_SLUG = {amenity.slug: amenity for amenity in AMENITY_FILTERS}


def get_amenity_filter(slug: str) -> Optional[AmenityFilter]:
    return AMENITY_FILTERS_BY_SLUG.get(slug)


def pub_matches_amenity(pub, amenity: AmenityFilter) -> bool:
    """Check a pub's amenity labels and features against a filter."""
    return amenity.matches(pub.display_features())
