"""Benchmark: Permission resolution latency, per-check p50/p99.

Measures the per-call latency of Distributor.has_permission() on the leaf
of a deep hierarchy where every check falls through to the root.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from distributor_permissions.distributors.distributor import (
    Distributor,
    DistributorBuilder,
)
from distributor_permissions.locations.location import Location

_WARMUP: int = 100
_ITERATIONS: int = 5_000
_DEPTH: int = 8
_RULES_PER_NODE: int = 10


def _make_hierarchy(depth: int) -> Distributor:
    """Build a chain of *depth* distributors; only the root grants Hubli."""
    node = DistributorBuilder("ROOT").add_include("hubli-karnataka-india").freeze()
    for level in range(1, depth):
        builder = DistributorBuilder(f"LEVEL{level}", parent=node)
        for i in range(_RULES_PER_NODE):
            builder.add_include(f"city{i}-province{level}-country")
            builder.add_exclude(f"town{i}-province{level}")
        node = builder.freeze()
    return node


def bench_resolution_latency() -> dict[str, object]:
    """Benchmark Distributor.has_permission() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms, memory_peak_mb.
    """
    leaf = _make_hierarchy(_DEPTH)
    location = Location("Hubli", "Karnataka", "India")

    for _ in range(_WARMUP):
        leaf.has_permission(location)

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        leaf.has_permission(location)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "resolution_latency",
        "iterations": _ITERATIONS,
        "depth": _DEPTH,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_latency_ms": round(sorted_lats[n // 2], 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_resolution_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_resolution_latency()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "resolution_latency.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
