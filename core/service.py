"""
In-memory race data service.

Holds the races parsed from the mail source and answers the queries the
HTTP layer and CLI need. The parser and stats functions are passed in once
at construction.

Usage:
    from functools import partial
    from core.messages import load_mail_directory
    from core.service import RaceDataService

    service = RaceDataService(source=partial(load_mail_directory, "./mail"))
    service.get_races(location="anaheim")
    service.get_racer_stats("Kevin")  # None if the racer isn't found
"""

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Optional

from core.logging import get_logger
from core.matching import RacerMatcher, location_matches, racer_name_matches
from core.messages import RawMessage
from core.models import ParsedRaceEmail, RacerStats
from core.parser import parse_race_email
from core.results import BatchResult, RaceEmailParser, parse_messages
from core.stats import get_racer_stats, list_locations, list_racers

logger = get_logger(__name__)

MessageSource = Callable[[], Iterable[RawMessage]]
RacerStatsFn = Callable[..., RacerStats]


def _naive_local(value: datetime) -> datetime:
    """Aware datetimes are converted to naive local time, like race dates."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class RaceDataService:
    """
    Race collection loaded from a message source.

    Data is loaded on first use and replaced as a whole by refresh().
    """

    def __init__(
        self,
        source: MessageSource,
        parse: RaceEmailParser = parse_race_email,
        racer_stats: RacerStatsFn = get_racer_stats,
        matcher: RacerMatcher = racer_name_matches,
    ):
        """
        Args:
            source: Returns the raw messages to parse
            parse: Email parser, parse(subject, text, html)
            racer_stats: Stats aggregator, racer_stats(races, name, matcher=...)
            matcher: Racer name policy shared by filtering and stats
        """
        self.source = source
        self.parse = parse
        self.racer_stats = racer_stats
        self.matcher = matcher
        self._races: Optional[tuple[ParsedRaceEmail, ...]] = None
        self.last_batch: Optional[BatchResult] = None
        self.last_loaded: Optional[datetime] = None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def refresh(self) -> tuple[ParsedRaceEmail, ...]:
        """Reload and reparse all messages from the source."""
        batch = parse_messages(self.source(), parse=self.parse)
        self._races = tuple(batch.races)
        self.last_batch = batch
        self.last_loaded = datetime.now()
        logger.info(f"Refreshed race data: {batch.summary()}")
        return self._races

    @property
    def race_count(self) -> Optional[int]:
        """Races currently loaded, None if nothing has been loaded yet."""
        if self._races is None:
            return None
        return len(self._races)

    def get_all_races(self, force_refresh: bool = False) -> tuple[ParsedRaceEmail, ...]:
        if force_refresh or self._races is None:
            return self.refresh()
        return self._races

    # -------------------------------------------------------------------------
    # Races
    # -------------------------------------------------------------------------

    def get_races(
        self,
        location: Optional[str] = None,
        racer_name: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[ParsedRaceEmail]:
        """
        Races matching all given filters.

        Location is a case-insensitive substring match, racer names go
        through the matcher and date bounds are inclusive. Timezone-aware bounds are compared in
        local time.
        """
        races = list(self.get_all_races())

        if location:
            races = [r for r in races if location_matches(location, r.race_info.location)]

        if racer_name:
            races = [
                r for r in races
                if any(self.matcher(racer_name, res.racer) for res in r.results)
            ]

        if start_date:
            start_date = _naive_local(start_date)
            races = [r for r in races if r.race_info.date >= start_date]

        if end_date:
            end_date = _naive_local(end_date)
            races = [r for r in races if r.race_info.date <= end_date]

        return races

    def get_race_by_id(self, race_id) -> Optional[ParsedRaceEmail]:
        """Race by its index in the collection."""
        races = self.get_all_races()
        try:
            index = int(race_id)
        except (TypeError, ValueError):
            return None

        if 0 <= index < len(races):
            return races[index]
        return None

    def get_locations(self) -> list[str]:
        return list_locations(self.get_all_races())

    # -------------------------------------------------------------------------
    # Racers
    # -------------------------------------------------------------------------

    def get_all_racers(self) -> list[str]:
        return list_racers(self.get_all_races())

    def get_racer_stats(self, racer_name: str) -> Optional[RacerStats]:
        """Stats for a racer, or None if they aren't in any race."""
        stats = self.racer_stats(self.get_all_races(), racer_name, matcher=self.matcher)
        if not stats.found:
            return None
        return stats
