"""
Tests for the .eml message source.

Run with: python -m pytest tests/test_messages.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.messages import RawMessage, _to_naive_utc, load_eml_file, load_mail_directory
from core.parser import parse_race_email


def eml(subject: str, date: str, text: str = None, html: str = None) -> str:
    headers = (
        "From: K1 Speed <noreply@k1speed.com>\n"
        "To: racer@example.com\n"
        f"Subject: {subject}\n"
        f"Date: {date}\n"
        "MIME-Version: 1.0\n"
    )
    parts = []
    if text is not None:
        parts.append(("text/plain", text))
    if html is not None:
        parts.append(("text/html", html))

    if len(parts) == 1:
        content_type, body = parts[0]
        return headers + f'Content-Type: {content_type}; charset="utf-8"\n\n{body}\n'

    boundary = "BOUNDARY123"
    out = headers + f'Content-Type: multipart/alternative; boundary="{boundary}"\n\n'
    for content_type, body in parts:
        out += f'--{boundary}\nContent-Type: {content_type}; charset="utf-8"\n\n{body}\n'
    return out + f"--{boundary}--\n"


@pytest.fixture
def mail_dir(tmp_path, subject, text_body, html_body):
    (tmp_path / "older.eml").write_text(
        eml(subject, "Mon, 29 Dec 2025 19:30:00 -0800", text=text_body, html=html_body)
    )
    (tmp_path / "newer.eml").write_text(
        eml(
            "Your Race Results at K1 Speed Ontario T2 01/15/26 10:30 AM",
            "Thu, 15 Jan 2026 10:45:00 -0800",
            html=html_body,
        )
    )
    (tmp_path / "other.eml").write_text(
        eml("Your Amazon order has shipped", "Fri, 02 Jan 2026 09:00:00 +0000", text="Hello")
    )
    (tmp_path / "notes.txt").write_text("not an email")
    return tmp_path


class TestLoadEmlFile:
    """Tests for load_eml_file()."""

    def test_multipart(self, mail_dir, subject):
        msg = load_eml_file(mail_dir / "older.eml")

        assert msg.subject == subject
        assert "Kevin Ruiz" in msg.text
        assert "<td" in msg.html
        assert msg.source == "older.eml"
        assert msg.date is not None
        assert msg.date.tzinfo is None

    def test_html_only(self, mail_dir):
        msg = load_eml_file(mail_dir / "newer.eml")

        assert msg.text is None
        assert "<table" in msg.html

    def test_parses_into_race(self, mail_dir):
        msg = load_eml_file(mail_dir / "newer.eml")
        parsed = parse_race_email(msg.subject, msg.text, msg.html)

        assert parsed.race_info.location == "K1 Speed Ontario"
        assert len(parsed.results) == 10
        assert parsed.diagnostics.source == "html"


class TestLoadMailDirectory:
    """Tests for load_mail_directory()."""

    def test_only_eml_files_newest_first(self, mail_dir):
        messages = load_mail_directory(mail_dir)

        assert [m.source for m in messages] == ["newer.eml", "other.eml", "older.eml"]

    def test_limit_keeps_most_recent(self, mail_dir):
        messages = load_mail_directory(mail_dir, limit=1)
        assert [m.source for m in messages] == ["newer.eml"]

    def test_no_limit(self, mail_dir):
        assert len(load_mail_directory(mail_dir, limit=None)) == 3

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_mail_directory(tmp_path / "missing")

    def test_unreadable_file_skipped(self, mail_dir):
        (mail_dir / "broken.eml").mkdir()

        messages = load_mail_directory(mail_dir)

        assert "broken.eml" not in [m.source for m in messages]
        assert len(messages) == 3

    def test_empty_directory(self, tmp_path):
        assert load_mail_directory(tmp_path) == []


class TestRawMessage:
    """Tests for RawMessage and date handling."""

    def test_defaults(self):
        msg = RawMessage(subject="Hello")
        assert msg.text is None
        assert msg.html is None

    def test_aware_date_converted_to_utc(self):
        aware = datetime(2025, 12, 29, 19, 30, tzinfo=timezone(timedelta(hours=-8)))
        assert _to_naive_utc(aware) == datetime(2025, 12, 30, 3, 30)

    def test_naive_date_unchanged(self):
        naive = datetime(2025, 12, 29, 19, 30)
        assert _to_naive_utc(naive) == naive
