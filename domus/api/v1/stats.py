"""GET /v1/dashboard and /v1/stats - Portfolio rollups"""

import time
from datetime import datetime
from fastapi import APIRouter, Depends, Request

from domus.api.v1.houses import to_house_stats_response
from domus.api.v1.schemas import DashboardResponse, StatsResponse
from domus.api.dependencies import get_aggregator, get_reference_time, get_request_id
from domus.domain.aggregation import PortfolioAggregator
from domus.infrastructure.observability.logging import log_status_computation
from domus.infrastructure.observability.metrics import record_portfolio, status_computation_histogram
from domus.utils.date_utils import month_key

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    request: Request,
    aggregator: PortfolioAggregator = Depends(get_aggregator),
    now: datetime = Depends(get_reference_time),
):
    """
    Dashboard counters.

    overdue_payments counts tenants with no payment for the current month
    (tenants who entered this month or later are never counted);
    monthly_revenue is the rent due across all tenants.
    """
    start_time = time.time()
    with status_computation_histogram.labels(scope="portfolio").time():
        houses = aggregator.all_house_stats(now)

    overdue = sum(h.overdue_count for h in houses)
    tenants = sum(h.tenant_count for h in houses)
    log_status_computation(
        get_request_id(request),
        scope="dashboard",
        tenant_count=tenants,
        overdue_count=overdue,
        reference_month=month_key(now),
        duration_ms=(time.time() - start_time) * 1000,
    )

    return DashboardResponse(
        houses=len(houses),
        tenants=tenants,
        overdue_payments=overdue,
        monthly_revenue=float(sum(h.total_rent for h in houses)),
        reference_month=month_key(now),
        house_stats=[to_house_stats_response(h) for h in houses],
    )


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    request: Request,
    aggregator: PortfolioAggregator = Depends(get_aggregator),
    now: datetime = Depends(get_reference_time),
):
    """
    Portfolio statistics.

    occupancy_rate keeps the historical formula (tenants over four rooms
    per house); room_occupancy_rate divides by the rooms actually recorded.
    """
    start_time = time.time()
    with status_computation_histogram.labels(scope="portfolio").time():
        houses = aggregator.all_house_stats(now)
        portfolio = aggregator.portfolio_stats(now, houses)

    record_portfolio(portfolio.overdue_count, portfolio.occupancy_rate, portfolio.room_occupancy_rate)
    log_status_computation(
        get_request_id(request),
        scope="stats",
        tenant_count=portfolio.total_tenants,
        overdue_count=portfolio.overdue_count,
        reference_month=month_key(now),
        duration_ms=(time.time() - start_time) * 1000,
    )

    return StatsResponse(
        total_houses=portfolio.total_houses,
        total_tenants=portfolio.total_tenants,
        total_rent=float(portfolio.total_rent),
        overdue_payments=portfolio.overdue_count,
        total_payments=portfolio.total_payments,
        total_revenue=float(portfolio.total_collected),
        occupancy_rate=portfolio.occupancy_rate,
        room_occupancy_rate=portfolio.room_occupancy_rate,
        house_stats=[to_house_stats_response(h) for h in houses],
    )
