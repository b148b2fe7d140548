"""Prometheus metrics for portfolio health, status computation and API latency"""

from prometheus_client import Counter, Histogram, Gauge

# Data mutations
mutation_counter = Counter(
    "domus_mutations_total",
    "Committed entity writes",
    ["entity", "action"],  # house|room|tenant|payment, created|updated|deleted
)

# Payment status
overdue_tenants_gauge = Gauge(
    "domus_overdue_tenants",
    "Tenants overdue for the current month at last portfolio rollup",
)

occupancy_rate_gauge = Gauge(
    "domus_occupancy_rate_percent",
    "Occupancy rate at last portfolio rollup",
    ["method"],  # nominal | rooms
)

status_computation_histogram = Histogram(
    "domus_status_computation_seconds",
    "Time spent deriving payment status rollups",
    ["scope"],  # house | portfolio | tenants | overdue
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_mutation(entity: str, action: str) -> None:
    mutation_counter.labels(entity=entity, action=action).inc()


def record_portfolio(overdue_count: int, occupancy_rate: int, room_occupancy_rate: int) -> None:
    """Publish the latest portfolio rollup"""
    overdue_tenants_gauge.set(overdue_count)
    occupancy_rate_gauge.labels(method="nominal").set(occupancy_rate)
    occupancy_rate_gauge.labels(method="rooms").set(room_occupancy_rate)
