"""Region matching.

Decides whether a concrete :class:`Location` falls inside a region
pattern by comparing normalised labels.  Two alignments are supported:

``MatchMode.POSITIONAL`` (default)
    Segment *i* of the pattern is compared with element *i* of
    ``[city, province, country]``.  A one-segment pattern such as
    ``"india"`` therefore constrains the **city** field, and
    ``"karnataka-india"`` constrains city and province.  Existing rule
    sets are written against this behaviour.

``MatchMode.COUNTRY_ANCHORED``
    Segments are right-aligned so the last segment is always compared
    with the country.  ``"india"`` means country India and
    ``"karnataka-india"`` means province Karnataka in country India.

Example
-------
::

    matcher = RegionMatcher()
    matcher.matches(hubli, "hubli-karnataka-india")   # True
    matcher.matches(hubli, "india")                   # False, compares city
"""
from __future__ import annotations

from enum import Enum

from distributor_permissions.locations.location import Location
from distributor_permissions.regions.pattern import (
    MAX_SEGMENTS,
    MalformedPatternError,
    RegionPattern,
)


class MatchMode(str, Enum):
    """How pattern segments are aligned with a location's fields."""

    POSITIONAL = "positional"
    COUNTRY_ANCHORED = "country_anchored"


class RegionMatcher:
    """Stateless matcher between locations and region patterns.

    Parameters
    ----------
    mode:
        Segment alignment.  Accepts a :class:`MatchMode` or its string
        value.
    """

    def __init__(self, mode: MatchMode | str = MatchMode.POSITIONAL) -> None:
        self._mode = MatchMode(mode)

    @property
    def mode(self) -> MatchMode:
        return self._mode

    def matches(self, location: Location | None, pattern: RegionPattern | str) -> bool:
        """Return True if *location* lies inside *pattern*.

        An absent location never matches.  String patterns are parsed on
        the fly; a malformed string pattern never matches.
        """
        if location is None:
            return False
        if not isinstance(pattern, RegionPattern):
            try:
                pattern = RegionPattern.parse(pattern)
            except MalformedPatternError:
                return False

        segments = pattern.segments
        if not segments or len(segments) > MAX_SEGMENTS:
            return False

        reference = location.parts()
        offset = 0
        if self._mode is MatchMode.COUNTRY_ANCHORED:
            offset = len(reference) - len(segments)

        return all(
            reference[offset + index] == segment
            for index, segment in enumerate(segments)
        )

    def __repr__(self) -> str:
        return f"RegionMatcher(mode={self._mode.value!r})"


_DEFAULT_MATCHER = RegionMatcher()


def matches(location: Location | None, pattern: RegionPattern | str) -> bool:
    """Module-level shortcut using positional alignment."""
    return _DEFAULT_MATCHER.matches(location, pattern)
