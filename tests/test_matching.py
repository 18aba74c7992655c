"""
Tests for racer and location matching rules.

Run with: python -m pytest tests/test_matching.py -v
"""

from core.matching import location_matches, racer_name_equals, racer_name_matches


class TestRacerNameMatches:
    """Tests for racer_name_matches()."""

    def test_exact(self):
        assert racer_name_matches("Kevin Ruiz", "Kevin Ruiz") is True

    def test_case_insensitive(self):
        assert racer_name_matches("KEVIN RUIZ", "kevin ruiz") is True

    def test_substring(self):
        """Weak identity: a short query matches longer names."""
        assert racer_name_matches("Ruiz", "Kevin Ruiz") is True
        assert racer_name_matches("Lee", "Leeroy") is True

    def test_no_match(self):
        assert racer_name_matches("Lam Le", "Kevin Ruiz") is False

    def test_missing_racer(self):
        assert racer_name_matches("Kevin", None) is False

    def test_empty_query_matches_everyone(self):
        assert racer_name_matches("", "Kevin Ruiz") is True


class TestRacerNameEquals:
    """Tests for racer_name_equals()."""

    def test_exact(self):
        assert racer_name_equals("Kevin Ruiz", "kevin ruiz") is True

    def test_whitespace(self):
        assert racer_name_equals("  Kevin   Ruiz ", "Kevin Ruiz") is True

    def test_substring_is_not_equal(self):
        assert racer_name_equals("Lee", "Leeroy") is False

    def test_missing_racer(self):
        assert racer_name_equals("Lee", None) is False


class TestLocationMatches:
    """Tests for location_matches()."""

    def test_substring(self):
        assert location_matches("anaheim", "K1 Speed Anaheim") is True

    def test_no_match(self):
        assert location_matches("Ontario", "K1 Speed Anaheim") is False

    def test_empty_location(self):
        assert location_matches("Anaheim", "") is False
        assert location_matches("Anaheim", None) is False
