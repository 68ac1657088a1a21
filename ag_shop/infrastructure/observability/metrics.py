"""Prometheus metrics for purchase activity, interest evaluation and webhook performance"""

from prometheus_client import Counter, Histogram

# Purchase metrics
purchase_counter = Counter(
    "ag_shop_purchase_total",
    "Purchases recorded",
    ["payment_type"],  # immediate | deposit
)

purchase_paid_counter = Counter(
    "ag_shop_purchase_paid_total",
    "Purchases marked as fully paid",
)

interest_evaluation_counter = Counter(
    "ag_shop_interest_evaluations_total",
    "Interest accruals computed for display or export",
    ["state"],  # open | closed
)

# Change notification webhook metrics
webhook_latency_histogram = Histogram(
    "change_webhook_latency_seconds",
    "Change webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "change_webhook_failures_total",
    "Failed change webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_purchase(immediate: bool) -> None:
    """Record a new purchase by payment type"""
    payment_type = "immediate" if immediate else "deposit"
    purchase_counter.labels(payment_type=payment_type).inc()


def record_interest_evaluation(open_ended: bool) -> None:
    """Count one accrual, split by whether it ran against today or a fixed end date"""
    interest_evaluation_counter.labels(state="open" if open_ended else "closed").inc()
