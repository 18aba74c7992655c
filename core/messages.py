"""
Raw message source.

Mailbox access (IMAP, OAuth) lives outside this project. What comes in is a
RawMessage: a subject plus optional plaintext and HTML bodies. For local runs
and the HTTP server, messages are read from a directory of .eml files
exported from the mailbox.

Usage:
    from core.messages import RawMessage, load_mail_directory

    messages = load_mail_directory("./mail", limit=50)  # Newest first
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import mailparser
from mailparser.exceptions import MailParserError

from core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LIMIT = 50
EML_PATTERN = "*.eml"


@dataclass(frozen=True)
class RawMessage:
    """A message as handed over by the mail retrieval side."""
    subject: str
    text: Optional[str] = None
    html: Optional[str] = None
    date: Optional[datetime] = None  # When the message was sent, UTC
    source: Optional[str] = None  # File name or message id, for logs


def _to_naive_utc(date: Optional[datetime]) -> Optional[datetime]:
    if date is None or date.tzinfo is None:
        return date
    return date.astimezone(timezone.utc).replace(tzinfo=None)


def _join_parts(parts: list[str]) -> Optional[str]:
    """Join MIME parts of one content type; None if the message has none."""
    if not parts:
        return None
    return "\n".join(parts)


def load_eml_file(path: Union[str, Path]) -> RawMessage:
    """
    Read one .eml file.

    Raises:
        OSError: If the file can't be read
        MailParserError: If the content can't be parsed as mail
    """
    path = Path(path)
    mail = mailparser.parse_from_file(str(path))

    return RawMessage(
        subject=mail.subject or "",
        text=_join_parts(mail.text_plain),
        html=_join_parts(mail.text_html),
        date=_to_naive_utc(mail.date),
        source=path.name,
    )


def load_mail_directory(
    mail_dir: Union[str, Path],
    limit: Optional[int] = DEFAULT_LIMIT,
) -> list[RawMessage]:
    """
    Read all .eml files in a directory.

    Unreadable files are skipped with a warning.

    Args:
        mail_dir: Directory containing .eml files
        limit: Keep only the most recent N messages (None for all)

    Returns:
        Messages, newest first (undated messages last)

    Raises:
        FileNotFoundError: If mail_dir doesn't exist
    """
    mail_dir = Path(mail_dir)
    if not mail_dir.is_dir():
        raise FileNotFoundError(f"Mail directory not found: {mail_dir}")

    messages = []
    for path in sorted(mail_dir.glob(EML_PATTERN)):
        try:
            messages.append(load_eml_file(path))
        except (OSError, MailParserError) as e:
            logger.warning(f"Skipping unreadable message {path.name}: {e}", extra={"file": path.name})

    messages.sort(key=lambda m: m.date or datetime.min, reverse=True)

    if limit is not None:
        messages = messages[:limit]

    logger.info(f"Loaded {len(messages)} message(s)", extra={"mail_dir": str(mail_dir)})
    return messages
