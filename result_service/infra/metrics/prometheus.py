"""Prometheus metrics for result exports."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry keeps test runs and multiple app instances isolated from
# the process-global default registry
REGISTRY = CollectorRegistry()

# Exports range from sub-second to many minutes for large tasks
EXPORT_DURATION_BUCKETS = (
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
    60.0,
    300.0,
    900.0,
)

# Archive size buckets (1KB to 1GB)
ARCHIVE_SIZE_BUCKETS = (
    1024,  # 1KB
    102400,  # 100KB
    1048576,  # 1MB
    10485760,  # 10MB
    104857600,  # 100MB
    1073741824,  # 1GB
)

export_requests_total = Counter(
    "export_requests_total",
    "Total export requests by outcome",
    ["format", "status"],
    registry=REGISTRY,
)

export_records_total = Counter(
    "export_records_total",
    "Result records written to export artifacts",
    ["format"],
    registry=REGISTRY,
)

export_pages_total = Counter(
    "export_pages_total",
    "Result pages fetched by exports",
    ["format"],
    registry=REGISTRY,
)

export_duration_seconds = Histogram(
    "export_duration_seconds",
    "Time from validation to a ready-to-serve archive",
    ["format"],
    buckets=EXPORT_DURATION_BUCKETS,
    registry=REGISTRY,
)

export_archive_bytes = Histogram(
    "export_archive_bytes",
    "Size of compressed export archives",
    ["format"],
    buckets=ARCHIVE_SIZE_BUCKETS,
    registry=REGISTRY,
)
