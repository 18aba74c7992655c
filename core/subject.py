"""
K1 Speed subject line parsing.

Subject format:
    "Your Race Results at K1 Speed Anaheim T1 12/29/25 07:17 PM"
                          |------| |------| |-| |------| |------|
                          vendor   location trk  date     time

Usage:
    from core.subject import parse_subject

    info = parse_subject("Your Race Results at K1 Speed Anaheim T1 12/29/25 07:17 PM")
    info.location  # "K1 Speed Anaheim"
    info.date      # datetime(2025, 12, 29, 19, 17)
"""

import re
from datetime import datetime
from typing import Optional

from core.models import RaceInfo

VENDOR_PREFIX = "K1 Speed"

# Two-digit years are promoted by adding this, with no century guessing
DEFAULT_CENTURY_BASE = 2000

SUBJECT_PATTERN = re.compile(
    r"Your Race Results at K1 Speed\s+(.+?)\s+(T\d+)\s+"
    r"(\d{1,2}/\d{1,2}/\d{2,4})\s+(\d{1,2}:\d{2}\s*[AP]M)",
    re.IGNORECASE,
)

TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})\s*([AP]M)", re.IGNORECASE)


def parse_race_date(date_str: str, century_base: int = DEFAULT_CENTURY_BASE) -> tuple[int, int, int]:
    """
    Split an M/D/YY or M/D/YYYY date into (year, month, day).

    Examples:
        >>> parse_race_date("12/29/25")
        (2025, 12, 29)
        >>> parse_race_date("1/5/2026")
        (2026, 1, 5)
    """
    month, day, year = (int(part) for part in date_str.split("/"))
    if year < 100:
        year += century_base
    return year, month, day


def parse_race_time(time_str: str) -> Optional[tuple[int, int]]:
    """
    Convert a 12-hour time with AM/PM to (hour, minute) in 24-hour form.

    Examples:
        >>> parse_race_time("07:17 PM")
        (19, 17)
        >>> parse_race_time("12:00 AM")
        (0, 0)
        >>> parse_race_time("12:30 PM")
        (12, 30)
    """
    match = TIME_PATTERN.search(time_str)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    meridiem = match.group(3).upper()

    if meridiem == "PM" and hours != 12:
        hours += 12
    elif meridiem == "AM" and hours == 12:
        hours = 0

    return hours, minutes


def parse_subject(subject: str, century_base: int = DEFAULT_CENTURY_BASE) -> Optional[RaceInfo]:
    """
    Extract race metadata from a K1 Speed results subject line.

    Args:
        subject: Email subject line
        century_base: Added to two-digit years (25 -> 2025)

    Returns:
        RaceInfo, or None if the subject is not a K1 Speed results subject
        or its date/time is not a real calendar instant
    """
    match = SUBJECT_PATTERN.search(subject)
    if not match:
        return None

    location, track, date_str, time_str = match.groups()

    clock = parse_race_time(time_str)
    if clock is None:
        return None

    year, month, day = parse_race_date(date_str, century_base)
    hours, minutes = clock

    try:
        date = datetime(year, month, day, hours, minutes)
    except ValueError:
        return None

    return RaceInfo(
        location=f"{VENDOR_PREFIX} {location.strip()}",
        track=track.upper(),
        date=date,
        raw_subject=subject,
    )
