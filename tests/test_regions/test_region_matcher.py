"""Tests for RegionMatcher in both alignment modes."""
from __future__ import annotations

import pytest

from distributor_permissions.locations.location import Location
from distributor_permissions.regions.matcher import MatchMode, RegionMatcher, matches
from distributor_permissions.regions.pattern import RegionPattern

HUBLI = Location("Hubli", "Karnataka", "India")
CHENNAI = Location("Chennai", "Tamil Nadu", "India")


@pytest.fixture()
def positional() -> RegionMatcher:
    return RegionMatcher()


@pytest.fixture()
def anchored() -> RegionMatcher:
    return RegionMatcher(MatchMode.COUNTRY_ANCHORED)


# ---------------------------------------------------------------------------
# Positional alignment
# ---------------------------------------------------------------------------


class TestPositionalMatching:
    def test_default_mode(self, positional: RegionMatcher) -> None:
        assert positional.mode is MatchMode.POSITIONAL

    def test_full_pattern_matches(self, positional: RegionMatcher) -> None:
        assert positional.matches(HUBLI, "hubli-karnataka-india") is True

    def test_full_pattern_wrong_country(self, positional: RegionMatcher) -> None:
        assert positional.matches(Location("Hubli", "Karnataka", "Canada"), "hubli-karnataka-india") is False

    def test_none_location_never_matches(self, positional: RegionMatcher) -> None:
        assert positional.matches(None, "india") is False

    def test_single_segment_compares_city(self, positional: RegionMatcher) -> None:
        assert positional.matches(HUBLI, "india") is False
        assert positional.matches(Location("India", "Somewhere", "Elsewhere"), "india") is True

    def test_single_segment_city_name(self, positional: RegionMatcher) -> None:
        assert positional.matches(HUBLI, "hubli") is True

    def test_two_segments_compare_city_and_province(self, positional: RegionMatcher) -> None:
        assert positional.matches(HUBLI, "karnataka-india") is False
        assert positional.matches(HUBLI, "hubli-karnataka") is True

    def test_province_country_pattern_misses_chennai(self, positional: RegionMatcher) -> None:
        assert positional.matches(CHENNAI, "tamilnadu-india") is False

    def test_case_and_whitespace_ignored(self, positional: RegionMatcher) -> None:
        loc = Location("  HUBLI ", "karnataka", "India ")
        assert positional.matches(loc, " Hubli - Karnataka - INDIA") is True

    def test_no_substring_matching(self, positional: RegionMatcher) -> None:
        assert positional.matches(HUBLI, "hub") is False

    def test_spaces_inside_labels_are_significant(self, positional: RegionMatcher) -> None:
        assert positional.matches(CHENNAI, "chennai-tamilnadu-india") is False
        assert positional.matches(CHENNAI, "chennai-tamil nadu-india") is True

    def test_parsed_pattern_accepted(self, positional: RegionMatcher) -> None:
        assert positional.matches(HUBLI, RegionPattern.parse("hubli")) is True

    def test_malformed_string_pattern_never_matches(self, positional: RegionMatcher) -> None:
        assert positional.matches(HUBLI, "hubli-karnataka-india-asia") is False
        assert positional.matches(HUBLI, "") is False

    def test_module_level_shortcut(self) -> None:
        assert matches(HUBLI, "hubli-karnataka-india") is True
        assert matches(HUBLI, "india") is False
        assert matches(None, "india") is False


# ---------------------------------------------------------------------------
# Country-anchored alignment
# ---------------------------------------------------------------------------


class TestCountryAnchoredMatching:
    def test_mode_from_string(self) -> None:
        assert RegionMatcher("country_anchored").mode is MatchMode.COUNTRY_ANCHORED

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ValueError):
            RegionMatcher("left_aligned")

    def test_single_segment_compares_country(self, anchored: RegionMatcher) -> None:
        assert anchored.matches(HUBLI, "india") is True
        assert anchored.matches(HUBLI, "hubli") is False

    def test_two_segments_compare_province_and_country(self, anchored: RegionMatcher) -> None:
        assert anchored.matches(HUBLI, "karnataka-india") is True
        assert anchored.matches(CHENNAI, "karnataka-india") is False

    def test_full_pattern_same_as_positional(self, anchored: RegionMatcher) -> None:
        assert anchored.matches(HUBLI, "hubli-karnataka-india") is True
        assert anchored.matches(Location("Hubli", "Karnataka", "Canada"), "hubli-karnataka-india") is False

    def test_none_location_never_matches(self, anchored: RegionMatcher) -> None:
        assert anchored.matches(None, "india") is False

    def test_repr(self, anchored: RegionMatcher) -> None:
        assert "country_anchored" in repr(anchored)
