"""Map TheSportsDB broadcast channels onto the site's TV vibes."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

TERRESTRIAL_TV = 'Terrestrial TV'

# Fixtures on other channels are not stored
ALLOWED_CHANNELS = frozenset({
    'Sky Sports',
    'TNT Sports',
    'Amazon Prime',
    'BBC',
    'ITV',
    TERRESTRIAL_TV,
})

TERRESTRIAL_KEYWORDS = ('bbc', 'itv', 'channel 4', 'terrestrial')


@dataclass(frozen=True)
class Channel:
    name: str
    slug: Optional[str] = None

    @property
    def link(self) -> str:
        """Page listing pubs that show this channel."""
        if self.slug:
            return f'/vibe/{self.slug}'
        if self.name == TERRESTRIAL_TV:
            return '/vibe/terrestrial-tv'
        return f'/pubs?amenities={quote(self.name, safe="")}'

    @property
    def is_allowed(self) -> bool:
        return self.name in ALLOWED_CHANNELS


def channel_from_broadcast(channel: Optional[str], event_name: Optional[str] = None) -> Channel:
    """
    Normalise a broadcaster name.

    A missing channel on a Six Nations match means free-to-air coverage.
    """
    if not channel or not channel.strip():
        if 'six nations' in (event_name or '').lower():
            return Channel(TERRESTRIAL_TV)
        return Channel('Other')

    lowered = channel.lower()
    if 'sky' in lowered:
        return Channel('Sky Sports', 'sky-sports')
    if 'tnt' in lowered or 'bt sport' in lowered:
        return Channel('TNT Sports', 'tnt-sports')
    if 'amazon' in lowered:
        return Channel('Amazon Prime')
    if any(keyword in lowered for keyword in TERRESTRIAL_KEYWORDS):
        return Channel(TERRESTRIAL_TV)
    return Channel(channel.strip())
