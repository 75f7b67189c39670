"""
Prometheus metrics.

Request traffic is labelled by method and route path. Catalog health is
tracked through the number of normalization anomalies per field, and the
AI helper through its outcomes.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

from prometheus_client import REGISTRY, Counter, Histogram

REQUEST_COUNTER = Counter(
    "resource_hub_http_requests_total",
    "HTTP requests handled",
    ["method", "path"],
    registry=REGISTRY,
)

REQUEST_LATENCY = Histogram(
    "resource_hub_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=REGISTRY,
)

NORMALIZATION_DIAGNOSTICS = Counter(
    "resource_normalization_diagnostics_total",
    "Anomalies found while normalizing stored resource records",
    ["field"],
    registry=REGISTRY,
)

# outcome: found, empty, error
METADATA_INFERENCE_COUNTER = Counter(
    "resource_metadata_inference_total",
    "AI metadata inference requests",
    ["outcome"],
    registry=REGISTRY,
)
