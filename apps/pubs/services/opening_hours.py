"""
Opening hours parsing.

Hours are stored the way Google Places formats ``weekday_text``, joined
with semicolons::

    Monday: 12:00 PM – 11:00 PM;Tuesday: 12:00 PM – 11:00 PM;...

All evaluation happens in London time.
"""

import re
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from django.utils import timezone

LONDON = ZoneInfo('Europe/London')

DAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']

# Google uses an en dash between open and close; hand-edited data uses hyphens
RANGE_SEPARATOR = re.compile(r'\s*[–—-]\s*')
TIME_PATTERN = re.compile(r'^(\d{1,2})(?::(\d{2}))?\s*([AaPp][Mm])?$')


def time_string_to_minutes(value: str) -> Optional[int]:
    """
    Convert a time like ``11:30 PM`` or ``9:00`` to minutes after midnight.

    Without an AM/PM marker, hours 8 to 11 are read as evening hours since
    pubs rarely open before noon.

    Returns:
        Minutes after midnight, or None when the string is not a time
    """
    if not value:
        return None
    cleaned = value.strip().replace('\u202f', ' ').replace('\xa0', ' ')
    match = TIME_PATTERN.match(cleaned)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    meridiem = (match.group(3) or '').upper()

    if hours > 23 or minutes > 59:
        return None

    if meridiem == 'PM' and hours != 12:
        hours += 12
    elif meridiem == 'AM' and hours == 12:
        hours = 0
    elif not meridiem and 8 <= hours <= 11:
        hours += 12

    return hours * 60 + minutes


def parse_opening_hours(opening_hours: str) -> dict[str, str]:
    """Split the stored string into ``{'Monday': '12:00 PM – 11:00 PM', ...}``."""
    days = {}
    for entry in (opening_hours or '').split(';'):
        if ':' not in entry:
            continue
        day, _, hours = entry.partition(':')
        day = day.strip()
        if day in DAY_NAMES:
            days[day] = hours.strip()
    return days


def _carry_meridiem(open_text: str, close_text: str) -> str:
    """``11:00 AM – 3:00`` style ranges share the closing meridiem."""
    if re.search(r'[AaPp][Mm]$', open_text) or not re.search(r'[AaPp][Mm]$', close_text):
        return open_text
    return f"{open_text} {close_text[-2:]}"


def is_open_at(opening_hours: str, moment: datetime) -> bool:
    """
    Whether a pub is open at the given moment.

    Handles ``Closed``, ``Open 24 hours``, several comma-separated ranges
    per day and ranges that run past midnight.
    """
    local = timezone.localtime(moment, LONDON) if timezone.is_aware(moment) else moment
    day_name = DAY_NAMES[local.weekday()]
    now_minutes = local.hour * 60 + local.minute

    days = parse_opening_hours(opening_hours)
    today = days.get(day_name)
    if today is None:
        return False

    lowered = today.lower()
    if 'closed' in lowered:
        return False
    if 'open 24 hours' in lowered:
        return True

    for time_range in today.split(','):
        parts = RANGE_SEPARATOR.split(time_range.strip(), maxsplit=1)
        if len(parts) != 2:
            continue
        open_text, close_text = parts
        open_minutes = time_string_to_minutes(_carry_meridiem(open_text, close_text))
        close_minutes = time_string_to_minutes(close_text)
        if open_minutes is None or close_minutes is None:
            continue

        if close_minutes < open_minutes:
            # Runs past midnight
            if now_minutes >= open_minutes or now_minutes < close_minutes:
                return True
        elif open_minutes <= now_minutes < close_minutes:
            return True

    return False


def is_open_now(opening_hours: str) -> bool:
    """Whether a pub is open right now in London."""
    return is_open_at(opening_hours, timezone.now())
