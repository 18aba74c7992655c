"""
Logging configuration for K1 Race Results.

Provides structured logging that can be:
- Written to console during development
- Written to files in production
- Sent to monitoring services

The parsing functions themselves never log; the batch runner, message
source, data service, server and CLI do.

Usage:
    from core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Loaded messages", extra={"mail_dir": "./mail", "count": 12})
    log_unrecognized_subject(logger, "Your Amazon order has shipped")
"""

import logging
import sys
from typing import Optional


# Custom formatter that includes extra fields
class StructuredFormatter(logging.Formatter):
    """Formatter that includes extra fields in log output."""

    RESERVED = {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "asctime", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        extras = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in self.RESERVED
        ]

        if extras:
            return f"{base} | {' '.join(extras)}"
        return base


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get a configured logger.

    Args:
        name: Logger name (usually __name__)
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        logger.setLevel(level)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)

        # Format: timestamp - level - name - message
        formatter = StructuredFormatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)

    return logger


class LogContext:
    """
    Context manager for adding context to log messages.

    Usage:
        with LogContext(logger, mail_dir="./mail"):
            logger.info("Parsing")  # Will include mail_dir=./mail
    """

    def __init__(self, logger: logging.Logger, **context):
        self.logger = logger
        self.context = context
        self._old_factory = None

    def __enter__(self):
        self._old_factory = logging.getLogRecordFactory()

        def factory(*args, **kwargs):
            record = self._old_factory(*args, **kwargs)
            for key, value in self.context.items():
                setattr(record, key, value)
            return record

        logging.setLogRecordFactory(factory)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        logging.setLogRecordFactory(self._old_factory)
        return False


def log_unrecognized_subject(
    logger: logging.Logger,
    subject: str,
    source: Optional[str] = None,
) -> None:
    """Log a message whose subject isn't a K1 Speed results subject."""
    extra = {"subject": subject}
    if source:
        extra["source"] = source
    logger.info(f"Could not parse: {subject}", extra=extra)


def log_skipped_rows(
    logger: logging.Logger,
    subject: str,
    skipped_lines: tuple[str, ...],
) -> None:
    """Log result rows that looked like data but didn't parse."""
    if not skipped_lines:
        return
    logger.debug(
        f"Skipped {len(skipped_lines)} malformed row(s) in: {subject}",
        extra={"subject": subject, "skipped": len(skipped_lines)},
    )


def log_batch_summary(
    logger: logging.Logger,
    total: int,
    parsed: int,
    empty: int,
    rows_skipped: int,
) -> None:
    """Log the outcome of parsing a batch of messages."""
    level = logging.WARNING if total and not parsed else logging.INFO
    logger.log(
        level,
        f"Parsed {parsed}/{total} message(s)",
        extra={
            "total": total,
            "parsed": parsed,
            "empty": empty,
            "unrecognized": total - parsed,
            "rows_skipped": rows_skipped,
        },
    )
