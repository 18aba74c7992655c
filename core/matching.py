"""
Racer and location matching rules.

Race emails only carry a display name per racer, so identity is weak:
"Lee" matches both "Lee" and "Leeroy Jenkins". The stats aggregator takes
the matching rule as a parameter so a stricter one can be swapped in.

A matcher is any callable (query, candidate) -> bool.
"""

from collections.abc import Callable
from typing import Optional

RacerMatcher = Callable[[str, str], bool]


def racer_name_matches(query: str, racer: Optional[str]) -> bool:
    """
    Case-insensitive substring match of a queried name in a racer name.

    Examples:
        >>> racer_name_matches("kevin", "Kevin Ruiz")
        True
        >>> racer_name_matches("Lee", "Leeroy")
        True
        >>> racer_name_matches("Lam Le", "Kevin Ruiz")
        False
    """
    if racer is None:
        return False
    return query.lower() in racer.lower()


def racer_name_equals(query: str, racer: Optional[str]) -> bool:
    """
    Case-insensitive exact match, ignoring surrounding and repeated spaces.

    Examples:
        >>> racer_name_equals("kevin  ruiz", "Kevin Ruiz")
        True
        >>> racer_name_equals("Lee", "Leeroy")
        False
    """
    if racer is None:
        return False
    return " ".join(query.lower().split()) == " ".join(racer.lower().split())


def location_matches(query: str, location: Optional[str]) -> bool:
    """
    Case-insensitive substring match for location filters.

    Examples:
        >>> location_matches("anaheim", "K1 Speed Anaheim")
        True
        >>> location_matches("Ontario", "K1 Speed Anaheim")
        False
    """
    if not location:
        return False
    return query.lower() in location.lower()
