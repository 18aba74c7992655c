"""
Racer statistics.

Aggregates a racer's results across a collection of parsed race emails.

Usage:
    from core.stats import get_racer_stats

    stats = get_racer_stats(races, "Kevin Ruiz")
    if not stats.found:
        ...  # races == 0: no data for this racer
    stats.best_time     # "28.844"
    stats.avg_position  # "1.5"
"""

import re
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from core.matching import RacerMatcher, racer_name_matches
from core.models import ParsedRaceEmail, RaceResult, RacerRaceResult, RacerStats

LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+))")


def parse_seconds(value: str) -> Optional[float]:
    """
    Parse a lap time string to seconds.

    Examples:
        >>> parse_seconds("28.844")
        28.844
        >>> parse_seconds("DNF") is None
        True
    """
    match = LEADING_FLOAT.match(value)
    if not match:
        return None
    return float(match.group(1))


def format_fixed(value: float, digits: int) -> str:
    """
    Format with a fixed number of decimals, rounding halves up.

    Examples:
        >>> format_fixed(28.972, 3)
        '28.972'
        >>> format_fixed(1.25, 1)
        '1.3'
    """
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def find_racer_result(
    race: ParsedRaceEmail,
    racer_name: str,
    matcher: RacerMatcher = racer_name_matches,
) -> Optional[RaceResult]:
    """First result in the race matching racer_name, in result order."""
    for result in race.results:
        if matcher(racer_name, result.racer):
            return result
    return None


def collect_racer_results(
    races: Iterable[ParsedRaceEmail],
    racer_name: str,
    matcher: RacerMatcher = racer_name_matches,
) -> list[RacerRaceResult]:
    """One entry per race the racer appears in, in input race order."""
    racer_results = []
    for race in races:
        result = find_racer_result(race, racer_name, matcher)
        if result:
            racer_results.append(RacerRaceResult.from_race(race, result))
    return racer_results


def get_racer_stats(
    races: Iterable[ParsedRaceEmail],
    racer_name: str,
    matcher: RacerMatcher = racer_name_matches,
) -> RacerStats:
    """
    Compute statistics for a racer across races.

    Args:
        races: Parsed race emails
        racer_name: Name to look for (matched by `matcher`)
        matcher: Matching rule, case-insensitive substring by default

    Returns:
        RacerStats. races == 0 if the racer wasn't found in any race.
    """
    if not isinstance(racer_name, str):
        raise TypeError(f"racer_name must be a str, got {type(racer_name).__name__}")

    racer_results = collect_racer_results(races, racer_name, matcher)

    if not racer_results:
        return RacerStats(racer=racer_name, races=0)

    positions = [r.position for r in racer_results]
    times = [t for t in (parse_seconds(r.best_time) for r in racer_results) if t is not None]

    best_time = None
    avg_best_time = None
    if times:
        best_time = format_fixed(min(times), 3)
        avg_best_time = format_fixed(sum(times) / len(times), 3)

    return RacerStats(
        racer=racer_name,
        races=len(racer_results),
        best_time=best_time,
        avg_best_time=avg_best_time,
        avg_position=format_fixed(sum(positions) / len(positions), 1),
        wins=sum(1 for p in positions if p == 1),
        podiums=sum(1 for p in positions if p <= 3),
        results=tuple(racer_results),
    )


def list_racers(races: Sequence[ParsedRaceEmail]) -> list[str]:
    """All racer names seen across races, sorted."""
    return sorted({result.racer for race in races for result in race.results})


def list_locations(races: Sequence[ParsedRaceEmail]) -> list[str]:
    """All race locations, sorted."""
    return sorted({race.race_info.location for race in races})
