"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Auth metrics
auth_attempts = Counter(
    'auth_attempts_total',
    'Authentication and account operations',
    ['operation', 'outcome']  # register/login/update, success/rejected/error
)

# Account deletion metrics
account_deletions = Counter(
    'account_deletions_total',
    'Account deletion workflow runs',
    ['outcome']  # success, not_found, error
)

tickets_restored = Counter(
    'tickets_restored_total',
    'Tickets returned to event inventory by account deletion'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_auth_attempt(operation: str, outcome: str):
    auth_attempts.labels(operation=operation, outcome=outcome).inc()


def record_account_deletion(outcome: str, tickets: int = 0):
    """Record a deletion run and the number of tickets it put back on sale."""
    account_deletions.labels(outcome=outcome).inc()
    if tickets:
        tickets_restored.inc(tickets)
