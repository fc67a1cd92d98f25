"""Distributor hierarchy and permission resolution.

Example
-------
::

    from distributor_permissions.distributors import DistributorBuilder

    parent = DistributorBuilder("DISTRIBUTOR1").add_include("india").freeze()
    child = DistributorBuilder("DISTRIBUTOR2", parent=parent).freeze()
    decision = child.explain(location)
"""
from __future__ import annotations

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

__all__ = [
    "CyclicHierarchyError",
    "Distributor",
    "DistributorBuilder",
    "DistributorRegistry",
    "PermissionDecision",
    "RegistryConfigError",
]
