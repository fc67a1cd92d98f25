#!/usr/bin/env python3
"""Example: Quickstart for distributor-permissions

Build a three-level distributor hierarchy, load the sample city dataset,
and check who may distribute where.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install distributor-permissions
"""
from __future__ import annotations

from pathlib import Path

import distributor_permissions as dp

_CITIES = Path(__file__).parent / "cities.csv"


def main() -> None:
    print(f"distributor-permissions version: {dp.__version__}")

    # Step 1: Load the location dataset
    cities = dp.LocationLoader().load(_CITIES)
    print(f"Loaded {len(cities)} cities")

    chicago = dp.find_location(cities, "Chicago", "Illinois", "United States")
    chennai = dp.find_location(cities, "Chennai", "Tamil Nadu", "India")
    bangalore = dp.find_location(cities, "Bangalore", "Karnataka", "India")
    hubli = dp.find_location(cities, "Hubli", "Karnataka", "India")

    # Step 2: Build the hierarchy, parents first
    distributor1 = (
        dp.DistributorBuilder("DISTRIBUTOR1")
        .add_include("india")
        .add_include("unitedstates")
        .add_exclude("karnataka-india")
        .add_exclude("chennai-tamilnadu-india")
        .freeze()
    )
    distributor2 = (
        dp.DistributorBuilder("DISTRIBUTOR2", parent=distributor1)
        .add_include("india")
        .add_exclude("tamilnadu-india")
        .freeze()
    )
    distributor3 = (
        dp.DistributorBuilder("DISTRIBUTOR3", parent=distributor2)
        .add_include("hubli-karnataka-india")
        .freeze()
    )

    # Step 3: Check permissions
    checks = [
        (distributor1, "Chicago", chicago),
        (distributor1, "Chennai", chennai),
        (distributor1, "Bangalore", bangalore),
        (distributor2, "Bangalore", bangalore),
        (distributor2, "Chennai", chennai),
        (distributor3, "Hubli", hubli),
    ]
    print("\nPermission checks:")
    for distributor, label, location in checks:
        decision = distributor.explain(location)
        icon = "ALLOW" if decision.allowed else "DENY"
        print(f"  [{icon}] {distributor.name} in {label}")
        print(f"    {decision.reason}")


if __name__ == "__main__":
    main()
