"""Prometheus metrics for sales, ledger payments, contracts and outbound calls"""

from decimal import Decimal
from prometheus_client import Counter, Histogram

# Sales metrics
sales_recorded_counter = Counter(
    "shopdesk_sales_recorded_total",
    "Employee sales recorded",
    ["commission_type"],  # percentage | fixed
)

commission_amount_histogram = Histogram(
    "shopdesk_commission_amount",
    "Commission paid out per recorded sale",
    buckets=[0, 100, 500, 1_000, 5_000, 10_000, 50_000, 100_000],
)

checkout_counter = Counter(
    "shopdesk_checkouts_total",
    "POS checkouts by opening payment status",
    ["payment_status"],  # completed | partial
)

# Ledger metrics
payments_applied_counter = Counter(
    "shopdesk_payments_applied_total",
    "Debt payments applied",
    ["payment_status"],  # completed | partial
)

ledger_conflicts_counter = Counter(
    "shopdesk_ledger_conflicts_total",
    "Writes rejected because the row changed since it was read",
    ["entity"],  # sale | contract
)

# Contract metrics
contract_transitions_counter = Counter(
    "shopdesk_contract_transitions_total",
    "Contract state transitions",
    ["to_status"],
)

# Activity log
activity_log_failures_counter = Counter(
    "shopdesk_activity_log_failures_total",
    "Activity log writes dropped after a persistence failure",
)

# Gateway metrics
gateway_failures_counter = Counter(
    "shopdesk_gateway_failures_total",
    "Failed payment gateway calls",
    ["operation"],  # initialize | verify
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "receipt_webhook_latency_seconds",
    "Receipt renderer webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "receipt_webhook_failures_total",
    "Failed receipt webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_sale(commission_type: str, commission_amount: Decimal) -> None:
    """Record sale metrics for commission payout monitoring"""
    sales_recorded_counter.labels(commission_type=commission_type).inc()
    commission_amount_histogram.observe(float(commission_amount))


def record_payment(payment_status: str) -> None:
    payments_applied_counter.labels(payment_status=payment_status).inc()
