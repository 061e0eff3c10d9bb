# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""
from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "directory_requests_total",
    "Total HTTP requests to the member directory",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "directory_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "directory_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
WHITELIST_CHECKS = Counter(
    "directory_whitelist_checks_total",
    "Whitelist lookups by outcome",
    ["result"],
)
MEMBER_QUERIES = Counter(
    "directory_member_queries_total",
    "Member lookups and searches",
    ["kind"],
)
MEMBER_UPDATES = Counter(
    "directory_member_updates_total",
    "Member record updates",
    ["kind"],
)
STATS_QUERIES = Counter(
    "directory_stats_queries_total",
    "Statistics aggregations computed",
    ["category"],
)
EMAILS_SENT = Counter(
    "directory_emails_sent_total",
    "Announcement email dispatches",
    ["status"],
)
