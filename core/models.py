"""
Race result data model.

Immutable records produced by the email parser and consumed by the stats
aggregator, the data service and the HTTP layer.

Field names in to_dict() are the JSON wire schema shared with the web
client, so they stay camelCase.

Usage:
    from core.models import RaceResult, RaceInfo, ParsedRaceEmail

    parsed.to_dict()["raceInfo"]["date"]  # "2025-12-29T19:17:00"
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RaceResult:
    """A single row from a race results table."""
    position: int
    racer: str
    best_time: str  # Kept as text to preserve source precision, e.g. "28.844"
    best_lap: int
    laps: int
    avg: str
    gap: str
    k1rs: str  # Opaque score, e.g. "1244 (+44)"

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "racer": self.racer,
            "bestTime": self.best_time,
            "bestLap": self.best_lap,
            "laps": self.laps,
            "avg": self.avg,
            "gap": self.gap,
            "k1rs": self.k1rs,
        }


@dataclass(frozen=True)
class RaceInfo:
    """Race metadata taken from the email subject."""
    location: str  # "K1 Speed Anaheim"
    track: str  # "T1"
    date: datetime  # Local wall-clock time, no timezone
    raw_subject: str

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "track": self.track,
            "date": self.date.isoformat(),
            "rawSubject": self.raw_subject,
        }


@dataclass(frozen=True)
class ExtractionDiagnostics:
    """
    How the results of one email were found.

    Not part of the wire schema. Callers use it to count malformed rows
    without parsing log output.
    """
    source: Optional[str] = None  # "text", "html", or None if neither body had rows
    skipped_lines: tuple[str, ...] = ()

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_lines)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "skipped_count": self.skipped_count,
            "skipped_lines": list(self.skipped_lines),
        }


@dataclass(frozen=True)
class ParsedRaceEmail:
    """A race email that had a recognizable subject."""
    race_info: RaceInfo
    results: tuple[RaceResult, ...] = ()  # Source rank order, never re-sorted
    raw_body: Optional[str] = None
    diagnostics: ExtractionDiagnostics = field(default_factory=ExtractionDiagnostics)

    @property
    def has_results(self) -> bool:
        return len(self.results) > 0

    def to_dict(self) -> dict:
        data = {
            "raceInfo": self.race_info.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }
        # rawBody is omitted when there is no text body
        if self.raw_body is not None:
            data["rawBody"] = self.raw_body
        return data


@dataclass(frozen=True)
class RacerRaceResult:
    """One racer's result in one race, with the race's date and venue."""
    date: datetime
    location: str
    track: str
    result: RaceResult

    @classmethod
    def from_race(cls, race: ParsedRaceEmail, result: RaceResult) -> "RacerRaceResult":
        info = race.race_info
        return cls(date=info.date, location=info.location, track=info.track, result=result)

    @property
    def racer(self) -> str:
        return self.result.racer

    @property
    def position(self) -> int:
        return self.result.position

    @property
    def best_time(self) -> str:
        return self.result.best_time

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "location": self.location,
            "track": self.track,
            **self.result.to_dict(),
        }


@dataclass(frozen=True)
class RacerStats:
    """
    Aggregate statistics for one racer.

    races == 0 means no race matched; every other field is then unset and
    must not be read as a real zero-result record.
    """
    racer: str
    races: int = 0
    best_time: Optional[str] = None
    avg_best_time: Optional[str] = None
    avg_position: Optional[str] = None
    wins: Optional[int] = None
    podiums: Optional[int] = None
    results: tuple[RacerRaceResult, ...] = ()

    @property
    def found(self) -> bool:
        return self.races > 0

    def to_dict(self) -> dict:
        if not self.found:
            return {"racer": self.racer, "races": 0}
        return {
            "racer": self.racer,
            "races": self.races,
            "bestTime": self.best_time,
            "avgBestTime": self.avg_best_time,
            "avgPosition": self.avg_position,
            "wins": self.wins,
            "podiums": self.podiums,
            "results": [r.to_dict() for r in self.results],
        }
