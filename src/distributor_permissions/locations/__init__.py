"""Location records and the CSV dataset loader."""
from __future__ import annotations

from distributor_permissions.locations.loader import (
    LocationLoadError,
    LocationLoader,
    find_location,
)
from distributor_permissions.locations.location import Location

__all__ = [
    "Location",
    "LocationLoadError",
    "LocationLoader",
    "find_location",
]
