"""
K1 Speed race email parser.

Combines the subject parser with the results table scanner. The plaintext
body is tried first; if it yields no rows (or is missing) the HTML body is
normalized and scanned instead.

Usage:
    from core.parser import parse_race_email

    parsed = parse_race_email(subject, text_body, html_body)
    if parsed is None:
        ...  # Not a K1 Speed results email
    elif not parsed.has_results:
        ...  # Recognized, but no table rows in either body
"""

from typing import Optional

from core.html_text import extract_text_from_html
from core.models import ExtractionDiagnostics, ParsedRaceEmail
from core.subject import DEFAULT_CENTURY_BASE, parse_subject
from core.table import TableScan, scan_results_table


def parse_race_email(
    subject: str,
    text_body: Optional[str] = None,
    html_body: Optional[str] = None,
    *,
    century_base: int = DEFAULT_CENTURY_BASE,
) -> Optional[ParsedRaceEmail]:
    """
    Parse a complete K1 Speed race email.

    Args:
        subject: Email subject
        text_body: Plaintext body, if the message has one
        html_body: HTML body, if the message has one
        century_base: Added to two-digit years in the subject date

    Returns:
        ParsedRaceEmail (possibly with no results), or None if the subject
        isn't a K1 Speed results subject
    """
    race_info = parse_subject(subject, century_base=century_base)
    if race_info is None:
        return None

    scan = TableScan()
    source = None

    if text_body is not None:
        scan = scan_results_table(text_body)
        if scan.results:
            source = "text"

    # Fallback fires on any empty result set, not only a missing text body
    if not scan.results and html_body is not None:
        html_scan = scan_results_table(extract_text_from_html(html_body))
        skipped = scan.skipped_lines + html_scan.skipped_lines
        scan = TableScan(
            results=html_scan.results,
            skipped_lines=skipped,
            candidates=scan.candidates + html_scan.candidates,
        )
        if scan.results:
            source = "html"

    return ParsedRaceEmail(
        race_info=race_info,
        results=scan.results,
        raw_body=text_body,
        diagnostics=ExtractionDiagnostics(
            source=source,
            skipped_lines=scan.skipped_lines,
        ),
    )
