"""
Results table extraction.

K1 Speed emails carry the results as a tab (or wide-space) separated table:

    #   Racer       Best Time  Best Lap  Laps  Avg.    Gap    K1RS
    1   Kevin Ruiz  28.844     8         11    36.975  0.000  1244 (+44)

Header, prose and footer lines are skipped; malformed data rows are dropped
and reported through TableScan.skipped_lines.

Usage:
    from core.table import parse_result_row, parse_results_table, scan_results_table

    results = parse_results_table(body)
    scan = scan_results_table(body)
    scan.skipped_lines  # Rows that looked like data but didn't parse
"""

import re
from dataclasses import dataclass
from typing import Optional

from core.models import RaceResult

# Fields: position, racer, best time, best lap, laps, avg, gap, K1RS
MIN_FIELDS = 8

FIELD_SEPARATOR = re.compile(r"\t+|\s{2,}")
LEADING_INT = re.compile(r"\s*([+-]?\d+)")
HEADER_LINE = re.compile(r"#\s")
ROW_CANDIDATE = re.compile(r"\d+\s")


@dataclass(frozen=True)
class TableScan:
    """Rows found in one body, plus the candidate rows that were rejected."""
    results: tuple[RaceResult, ...] = ()
    skipped_lines: tuple[str, ...] = ()
    candidates: int = 0


def _parse_int(token: str) -> Optional[int]:
    """Leading-digit integer parse ("8" -> 8, "8th" -> 8, "#" -> None)."""
    match = LEADING_INT.match(token)
    if not match:
        return None
    return int(match.group(1))


def split_fields(line: str) -> list[str]:
    """
    Split a table line on tabs or runs of 2+ spaces.

    Examples:
        >>> split_fields("1\\tKevin Ruiz\\t28.844")
        ['1', 'Kevin Ruiz', '28.844']
        >>> split_fields("1   Kevin Ruiz   28.844")
        ['1', 'Kevin Ruiz', '28.844']
    """
    parts = (p.strip() for p in FIELD_SEPARATOR.split(line))
    return [p for p in parts if p]


def parse_result_row(line: str) -> Optional[RaceResult]:
    """
    Parse one table line into a RaceResult.

    Returns None for header rows (non-numeric position), rows with fewer
    than 8 fields, and rows whose lap counts aren't integers. Never raises.
    """
    parts = split_fields(line)
    if len(parts) < MIN_FIELDS:
        return None

    position = _parse_int(parts[0])
    if position is None:
        return None

    best_lap = _parse_int(parts[3])
    laps = _parse_int(parts[4])
    if best_lap is None or laps is None:
        return None

    return RaceResult(
        position=position,
        racer=parts[1],
        best_time=parts[2],
        best_lap=best_lap,
        laps=laps,
        avg=parts[5],
        gap=parts[6],
        k1rs=parts[7],
    )


def scan_results_table(body: Optional[str]) -> TableScan:
    """
    Scan an email body for result rows.

    Only lines starting with a number followed by whitespace are treated as
    rows; everything else is ignored without being reported.
    """
    if not body:
        return TableScan()

    results = []
    skipped = []
    candidates = 0

    for line in body.split("\n"):
        trimmed = line.strip()

        if not trimmed or HEADER_LINE.match(trimmed):
            continue

        if not ROW_CANDIDATE.match(trimmed):
            continue

        candidates += 1
        result = parse_result_row(trimmed)
        if result:
            results.append(result)
        else:
            skipped.append(trimmed)

    return TableScan(
        results=tuple(results),
        skipped_lines=tuple(skipped),
        candidates=candidates,
    )


def parse_results_table(body: Optional[str]) -> list[RaceResult]:
    """Parse all result rows from an email body, in source order."""
    return list(scan_results_table(body).results)
