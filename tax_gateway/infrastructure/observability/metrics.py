"""Prometheus metrics for calculation volume, store health, and chat usage"""

from prometheus_client import Counter, Histogram

# Calculation metrics
calculation_counter = Counter(
    "tax_calculation_total",
    "Total tax calculations served",
    ["storage"],  # saved | unavailable
)

effective_rate_histogram = Histogram(
    "tax_effective_rate_percent",
    "Effective tax rate of served calculations",
    buckets=[0, 5, 10, 15, 20, 25],
)

calculation_lookup_counter = Counter(
    "calculation_lookup_total",
    "Stored calculation lookups",
    ["outcome"],  # found | not_found | error
)

# Result store metrics
store_failures_counter = Counter(
    "result_store_failures_total",
    "Failed result store operations",
    ["operation"],  # save | get
)

# Chat metrics
chat_request_counter = Counter(
    "chat_requests_total",
    "Tax assistant chat requests",
    ["outcome"],  # answered | failed | rate_limited
)

llm_latency_histogram = Histogram(
    "llm_latency_seconds",
    "Gemini API response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(stored: bool, effective_tax_rate: float) -> None:
    """Record calculation metrics, split by whether the result could be saved"""
    calculation_counter.labels(storage="saved" if stored else "unavailable").inc()
    effective_rate_histogram.observe(effective_tax_rate)
