"""Prometheus metric inventory.

All metrics are declared here and incremented where the behavior lives:
HTTP metrics by MetricsMiddleware, issuance metrics by the issuance
service, upload and ledger metrics by their clients.
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
    # Simulated issuance is sub-10ms; a Pinata upload adds ~100-500ms and
    # the on-chain path is three confirmed RPC round trips (several seconds).
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Issuance metrics
# ---------------------------------------------------------------------------

CERTIFICATES_ISSUED = Counter(
    "certificates_issued_total",
    "Certificates persisted by the issuance service",
    ["variant"],  # "simulated" or "onchain"
)

ISSUANCE_REJECTIONS = Counter(
    "issuance_rejections_total",
    "Issuance attempts rejected before any side effect",
    ["reason"],  # "validation" or "authorization"
)

METADATA_UPLOADS = Counter(
    "metadata_uploads_total",
    "Certificate metadata uploads by outcome",
    ["result"],  # "pinned" or "placeholder"
)

LEDGER_CALLS = Counter(
    "ledger_calls_total",
    "Ledger round trips by minting step and outcome",
    ["step", "result"],  # step: create_mint|create_account|mint_to
)
