"""
Tests for K1 Speed subject line parsing.

Run with: python -m pytest tests/test_subject.py -v
"""

from datetime import datetime

import pytest

from core.subject import parse_race_date, parse_race_time, parse_subject


class TestParseSubject:
    """Tests for parse_subject()."""

    def test_standard_subject(self):
        info = parse_subject("Your Race Results at K1 Speed Anaheim T1 12/29/25 07:17 PM")

        assert info is not None
        assert info.location == "K1 Speed Anaheim"
        assert info.track == "T1"
        assert info.date == datetime(2025, 12, 29, 19, 17)

    def test_different_location(self):
        info = parse_subject("Your Race Results at K1 Speed Ontario T2 01/15/26 10:30 AM")

        assert info.location == "K1 Speed Ontario"
        assert info.track == "T2"
        assert info.date == datetime(2026, 1, 15, 10, 30)

    def test_multi_word_location(self):
        info = parse_subject("Your Race Results at K1 Speed San Diego T3 3/4/26 6:05 PM")

        assert info.location == "K1 Speed San Diego"
        assert info.track == "T3"
        assert info.date == datetime(2026, 3, 4, 18, 5)

    def test_raw_subject_kept_verbatim(self):
        subject = "Fwd: Your Race Results at K1 Speed Anaheim T1 12/29/25 07:17 PM"
        info = parse_subject(subject)

        assert info.raw_subject == subject

    def test_case_insensitive(self):
        info = parse_subject("your race results at k1 speed Anaheim t1 12/29/25 07:17 pm")

        assert info.location == "K1 Speed Anaheim"
        assert info.track == "T1"
        assert info.date.hour == 19

    def test_four_digit_year(self):
        info = parse_subject("Your Race Results at K1 Speed Anaheim T1 12/29/2025 07:17 PM")
        assert info.date.year == 2025

    def test_noon(self):
        info = parse_subject("Your Race Results at K1 Speed Anaheim T1 12/29/25 12:00 PM")
        assert info.date.hour == 12

    def test_midnight(self):
        info = parse_subject("Your Race Results at K1 Speed Anaheim T1 12/29/25 12:00 AM")
        assert info.date.hour == 0

    @pytest.mark.parametrize("subject", [
        "Your Amazon order has shipped",
        "Your Race Results at K1 Speed Anaheim 12/29/25 07:17 PM",  # No track
        "Your Race Results at K1 Speed Anaheim T1 07:17 PM",  # No date
        "Your Race Results at K1 Speed Anaheim T1 12/29/25",  # No time
        "",
    ])
    def test_non_matching_subject(self, subject):
        assert parse_subject(subject) is None

    def test_impossible_date(self):
        assert parse_subject("Your Race Results at K1 Speed Anaheim T1 13/45/25 07:17 PM") is None

    def test_custom_century_base(self):
        info = parse_subject(
            "Your Race Results at K1 Speed Anaheim T1 12/29/25 07:17 PM",
            century_base=2100,
        )
        assert info.date.year == 2125


class TestParseRaceDate:
    """Tests for parse_race_date()."""

    def test_two_digit_year(self):
        assert parse_race_date("12/29/25") == (2025, 12, 29)

    def test_two_digit_year_never_guesses_century(self):
        assert parse_race_date("1/1/99") == (2099, 1, 1)

    def test_four_digit_year(self):
        assert parse_race_date("1/5/2026") == (2026, 1, 5)


class TestParseRaceTime:
    """Tests for parse_race_time()."""

    def test_pm(self):
        assert parse_race_time("07:17 PM") == (19, 17)

    def test_am(self):
        assert parse_race_time("9:05 AM") == (9, 5)

    def test_no_space(self):
        assert parse_race_time("7:17PM") == (19, 17)

    def test_twelve_am_and_pm(self):
        assert parse_race_time("12:30 AM") == (0, 30)
        assert parse_race_time("12:30 PM") == (12, 30)

    def test_invalid(self):
        assert parse_race_time("19:17") is None
