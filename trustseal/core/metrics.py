"""Prometheus metric inventory.

Every metric the service exports is declared here; the modules that own
the behaviour import the one they need and increment/observe it at the
point of action.  Scraped through GET /metrics.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Credential metrics
# ---------------------------------------------------------------------------

ISSUANCES = Counter(
    "credential_issuances_total",
    "Credential issuance attempts by outcome",
    ["result"],  # issued|not_found|worker_error|conflict
)

VERIFICATIONS = Counter(
    "proof_verifications_total",
    "Proof verification requests by outcome",
    ["result"],  # valid|invalid|rejected
)

PROOF_WORKER_DURATION = Histogram(
    "proof_worker_request_duration_seconds",
    "Round-trip time of calls to the proof worker",
    ["operation"],  # issue|verify
    # Proof generation is far slower than a typical API call.
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

PROOF_WORKER_FAILURES = Counter(
    "proof_worker_failures_total",
    "Failed calls to the proof worker",
    ["operation", "reason"],  # reason: transport|status|malformed|rejected
)
