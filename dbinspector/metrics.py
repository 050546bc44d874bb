from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Gauge, Histogram
from dbinspector.prom import REGISTRY


# -----------------------------------------------------------------------------
#  Facade operation metrics
# -----------------------------------------------------------------------------
operations_total = Counter(
    "inspector_operations_total",
    "Count of inspector facade operations",
    ["operation", "ok"],  # e.g. tables|table_info|user_version ; "true"|"false"
    registry=REGISTRY,
)

operation_duration_ms = Histogram(
    "inspector_operation_duration_ms",
    "Duration (ms) of inspector facade operations",
    ["operation"],
    buckets=(1, 2, 5, 10, 20, 50, 100, 200, 500, 1000, 2000, 5000),
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
#  Row mutation metrics
# -----------------------------------------------------------------------------
mutations_total = Counter(
    "inspector_mutations_total",
    "Row mutations by kind and whether a row was affected",
    ["kind", "affected"],  # insert|update|delete ; "true"|"false"
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
#  Discovery
# -----------------------------------------------------------------------------
discovered_files = Gauge(
    "inspector_discovered_files",
    "Number of database files found by the last discovery run",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
#  Prime counters with zero so dashboards always have series
# -----------------------------------------------------------------------------
for kind in ("insert", "update", "delete"):
    for affected in ("true", "false"):
        mutations_total.labels(kind=kind, affected=affected).inc(0)


@contextmanager
def track_operation(operation: str) -> Iterator[None]:
    """Time a facade operation and count it as ok unless it raises."""
    t0 = time.perf_counter()
    ok = "false"
    try:
        yield
        ok = "true"
    finally:
        operation_duration_ms.labels(operation=operation).observe(
            (time.perf_counter() - t0) * 1000
        )
        operations_total.labels(operation=operation, ok=ok).inc()
