"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total license keys issued",
    ["product", "persisted"],
)

licenses_activated_total = Counter(
    "licenses_activated_total",
    "Total licenses bound to a device",
    ["product"],
)

license_verifications_total = Counter(
    "license_verifications_total",
    "License verification outcomes",
    ["result"],
)

license_key_collisions_total = Counter(
    "license_key_collisions_total",
    "Generated license keys rejected as duplicates",
)

# Store metrics
store_errors_total = Counter(
    "license_store_errors_total",
    "License store failures and timeouts",
    ["operation"],
)
