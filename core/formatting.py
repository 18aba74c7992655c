"""
Fixed-width text rendering of parsed races, for logs and the CLI.

Columns are padded, never truncated; long racer names push the rest of the
row to the right.
"""

from datetime import datetime

from core.models import ParsedRaceEmail

BANNER_WIDTH = 60
DIVIDER_WIDTH = 75

# (header, width); K1RS is last and unpadded
COLUMNS = (
    ("Pos", 4),
    ("Racer", 20),
    ("Best", 8),
    ("Lap", 4),
    ("Total", 6),
    ("Avg", 8),
    ("Gap", 8),
)


def format_race_date(date: datetime) -> str:
    """
    Format a race date as "M/D/YYYY, h:MM:SS AM".

    Examples:
        >>> format_race_date(datetime(2025, 12, 29, 19, 17))
        '12/29/2025, 7:17:00 PM'
        >>> format_race_date(datetime(2026, 1, 5, 0, 5))
        '1/5/2026, 12:05:00 AM'
    """
    hour = date.hour % 12 or 12
    meridiem = "PM" if date.hour >= 12 else "AM"
    return (
        f"{date.month}/{date.day}/{date.year}, "
        f"{hour}:{date.minute:02d}:{date.second:02d} {meridiem}"
    )


def format_results(parsed: ParsedRaceEmail) -> str:
    """Format a parsed race email as a readable table."""
    info = parsed.race_info

    lines = [
        "",
        "=" * BANNER_WIDTH,
        f"Race: {info.location} - {info.track}",
        f"Date: {format_race_date(info.date)}",
        "=" * BANNER_WIDTH,
        "",
        " ".join(name.ljust(width) for name, width in COLUMNS) + " K1RS",
        "-" * DIVIDER_WIDTH,
    ]

    for r in parsed.results:
        cells = (r.position, r.racer, r.best_time, r.best_lap, r.laps, r.avg, r.gap)
        row = " ".join(str(value).ljust(width) for value, (_, width) in zip(cells, COLUMNS))
        lines.append(f"{row} {r.k1rs}")

    return "\n".join(lines) + "\n"
