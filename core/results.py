"""
Batch parsing results.

Parsing a mailbox export means most messages parse, some are unrelated mail
and a few are race emails with a broken table. Every message gets an
outcome with a status, so callers can report what was skipped.

Usage:
    from core.results import parse_messages, ParseStatus

    batch = parse_messages(messages)
    batch.races            # ParsedRaceEmail list, input order
    batch.skipped          # Outcomes with UNRECOGNIZED_SUBJECT
    print(batch.summary())
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from core.logging import (
    LogContext,
    get_logger,
    log_batch_summary,
    log_skipped_rows,
    log_unrecognized_subject,
)
from core.messages import RawMessage
from core.models import ParsedRaceEmail
from core.parser import parse_race_email

logger = get_logger(__name__)

RaceEmailParser = Callable[..., Optional[ParsedRaceEmail]]


class ParseStatus(Enum):
    """Outcome of parsing one message."""

    OK = "ok"  # Subject recognized, results found
    EMPTY_RESULTS = "empty_results"  # Subject recognized, no result rows
    UNRECOGNIZED_SUBJECT = "unrecognized_subject"  # Not a K1 Speed results email


STATUS_MESSAGES = {
    ParseStatus.OK: "Race results parsed",
    ParseStatus.EMPTY_RESULTS: "Race email recognized but no result rows found",
    ParseStatus.UNRECOGNIZED_SUBJECT: "Subject is not a K1 Speed race results subject",
}


@dataclass
class MessageOutcome:
    """Result of parsing one raw message."""

    status: ParseStatus
    subject: str
    parsed: Optional[ParsedRaceEmail] = None
    source: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True if the message produced a race (with or without rows)."""
        return self.parsed is not None

    @property
    def message(self) -> str:
        return STATUS_MESSAGES[self.status]

    @property
    def rows_skipped(self) -> int:
        if self.parsed is None:
            return 0
        return self.parsed.diagnostics.skipped_count

    @classmethod
    def from_parsed(
        cls,
        subject: str,
        parsed: Optional[ParsedRaceEmail],
        source: Optional[str] = None,
    ) -> "MessageOutcome":
        if parsed is None:
            status = ParseStatus.UNRECOGNIZED_SUBJECT
        elif parsed.has_results:
            status = ParseStatus.OK
        else:
            status = ParseStatus.EMPTY_RESULTS
        return cls(status=status, subject=subject, parsed=parsed, source=source)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "message": self.message,
            "subject": self.subject,
            "source": self.source,
            "results": len(self.parsed.results) if self.parsed else 0,
            "rows_skipped": self.rows_skipped,
        }


@dataclass
class BatchResult:
    """Result of parsing a batch of messages."""

    outcomes: list[MessageOutcome] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def races(self) -> list[ParsedRaceEmail]:
        """Every parsed race email, including ones with no rows, in input order."""
        return [o.parsed for o in self.outcomes if o.parsed is not None]

    @property
    def skipped(self) -> list[MessageOutcome]:
        """Messages that weren't K1 Speed results emails."""
        return [o for o in self.outcomes if not o.ok]

    @property
    def empty(self) -> list[MessageOutcome]:
        return [o for o in self.outcomes if o.status == ParseStatus.EMPTY_RESULTS]

    @property
    def total_rows_skipped(self) -> int:
        return sum(o.rows_skipped for o in self.outcomes)

    def add(self, outcome: MessageOutcome) -> None:
        self.outcomes.append(outcome)

    def summary(self) -> str:
        """Get a summary string."""
        return (
            f"{len(self.races)}/{len(self.outcomes)} messages parsed "
            f"({len(self.empty)} without results, {len(self.skipped)} unrecognized, "
            f"{self.total_rows_skipped} malformed rows skipped)"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total": len(self.outcomes),
            "parsed": len(self.races),
            "empty": len(self.empty),
            "unrecognized": len(self.skipped),
            "rows_skipped": self.total_rows_skipped,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "timestamp": self.timestamp.isoformat(),
        }


def parse_messages(
    messages: Iterable[RawMessage],
    parse: RaceEmailParser = parse_race_email,
) -> BatchResult:
    """
    Parse a batch of raw messages.

    Unrecognized messages are skipped and recorded; parsing carries on.

    Args:
        messages: Raw messages from the mail source
        parse: Email parser, called as parse(subject, text, html)

    Returns:
        BatchResult with one outcome per message
    """
    batch = BatchResult()

    for msg in messages:
        parsed = parse(msg.subject, msg.text, msg.html)
        outcome = MessageOutcome.from_parsed(msg.subject, parsed, source=msg.source)
        batch.add(outcome)

        # Records logged for this message carry its file
        with LogContext(logger, source=msg.source):
            if parsed is None:
                log_unrecognized_subject(logger, msg.subject)
            else:
                log_skipped_rows(logger, msg.subject, parsed.diagnostics.skipped_lines)

    log_batch_summary(
        logger,
        total=len(batch.outcomes),
        parsed=len(batch.races),
        empty=len(batch.empty),
        rows_skipped=batch.total_rows_skipped,
    )
    return batch
