"""distributor-permissions: hierarchical region permissions for distributors.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import distributor_permissions as dp
>>> dp.__version__
'0.1.0'
>>> national = dp.DistributorBuilder("DISTRIBUTOR1").add_include("hubli-karnataka-india").freeze()
>>> national.has_permission(dp.Location("Hubli", "Karnataka", "India"))
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------
from distributor_permissions.locations.location import Location
from distributor_permissions.locations.loader import (
    LocationLoadError,
    LocationLoader,
    find_location,
)

# ---------------------------------------------------------------------------
# Regions
# ---------------------------------------------------------------------------
from distributor_permissions.regions.pattern import MalformedPatternError, RegionPattern
from distributor_permissions.regions.matcher import MatchMode, RegionMatcher, matches

# ---------------------------------------------------------------------------
# Distributors
# ---------------------------------------------------------------------------
from distributor_permissions.distributors.distributor import (
    CyclicHierarchyError,
    Distributor,
    DistributorBuilder,
    PermissionDecision,
)
from distributor_permissions.distributors.registry import (
    DistributorRegistry,
    RegistryConfigError,
)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from distributor_permissions.config import AppConfig, ConfigLoader

__all__ = [
    "__version__",
    # Locations
    "Location",
    "LocationLoadError",
    "LocationLoader",
    "find_location",
    # Regions
    "MalformedPatternError",
    "MatchMode",
    "RegionMatcher",
    "RegionPattern",
    "matches",
    # Distributors
    "CyclicHierarchyError",
    "Distributor",
    "DistributorBuilder",
    "DistributorRegistry",
    "PermissionDecision",
    "RegistryConfigError",
    # Configuration
    "AppConfig",
    "ConfigLoader",
]
