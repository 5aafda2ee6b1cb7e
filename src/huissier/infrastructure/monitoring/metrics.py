"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Histogram

# ============================================================
# HTTP Metrics
# ============================================================

http_requests_total = Counter(
    "huissier_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "huissier_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# ============================================================
# Authentication Metrics
# ============================================================

auth_attempts_total = Counter(
    "huissier_auth_attempts_total",
    "Wallet sign-in attempts by outcome",
    ["outcome"],
)

nonces_issued_total = Counter(
    "huissier_nonces_issued_total",
    "Sign-in nonces issued",
    ["kind"],
)

identities_created_total = Counter(
    "huissier_identities_created_total",
    "Identities provisioned on first sign-in",
)

backend_request_duration_seconds = Histogram(
    "huissier_backend_request_duration_seconds",
    "Identity backend request duration in seconds",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

nonces_purged_total = Counter(
    "huissier_nonces_purged_total",
    "Expired sign-in nonces deleted",
)
