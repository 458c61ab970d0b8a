"""Prometheus metrics for extraction quality, recalculations and rate lookups"""

from prometheus_client import Counter, Histogram

# Extraction metrics
extraction_counter = Counter(
    "rmc_extraction_total",
    "Statement extractions attempted",
    ["outcome"],  # ok | degraded | no_records | failed
)

extracted_payments_histogram = Histogram(
    "rmc_extracted_payments",
    "Payments recognized per statement",
    buckets=[1, 6, 12, 24, 48, 96, 192],
)

# Calculation metrics
calculation_counter = Counter(
    "rmc_calculation_total",
    "Amortization recalculations",
    ["outcome"],  # restitution | no_restitution | invalid
)

# Rate provider metrics
rate_lookup_failures_counter = Counter(
    "rate_lookup_failures_total",
    "Failed rate series API calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_extraction(payment_count: int, degraded_dates: bool) -> None:
    """Record a successful extraction"""
    extraction_counter.labels(outcome="degraded" if degraded_dates else "ok").inc()
    extracted_payments_histogram.observe(payment_count)


def record_calculation(total_restitution_cents: int) -> None:
    """Record a completed recalculation"""
    outcome = "restitution" if total_restitution_cents > 0 else "no_restitution"
    calculation_counter.labels(outcome=outcome).inc()
