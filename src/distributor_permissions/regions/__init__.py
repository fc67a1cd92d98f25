"""Region patterns and location matching."""
from __future__ import annotations

from distributor_permissions.regions.matcher import MatchMode, RegionMatcher, matches
from distributor_permissions.regions.pattern import MalformedPatternError, RegionPattern

__all__ = [
    "MalformedPatternError",
    "MatchMode",
    "RegionMatcher",
    "RegionPattern",
    "matches",
]
