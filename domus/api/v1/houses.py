"""/v1/houses - House management with tenant rollups"""

import time
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from domus.api.v1.schemas import (
    HouseCreate,
    HouseDetailResponse,
    HouseResponse,
    HouseStatsResponse,
    HouseUpdate,
    RoomResponse,
    TenantResponse,
)
from domus.api.dependencies import (
    commit_change,
    get_aggregator,
    get_reference_time,
    get_request_id,
    get_store,
    raise_http_error,
)
from domus.domain.aggregation import PortfolioAggregator
from domus.domain.exceptions import DomainException
from domus.domain.models import HouseStats
from domus.infrastructure.database.session import get_db
from domus.infrastructure.database.repositories import HouseRepository, SqlEntityStore, TenantRepository
from domus.infrastructure.observability.logging import log_status_computation
from domus.infrastructure.observability.metrics import status_computation_histogram
from domus.utils.date_utils import month_key

router = APIRouter()


def to_house_stats_response(stats: HouseStats) -> HouseStatsResponse:
    return HouseStatsResponse(
        id=stats.house.id,
        name=stats.house.name,
        address=stats.house.address,
        created_at=stats.house.created_at,
        tenant_count=stats.tenant_count,
        total_rent=float(stats.total_rent),
        overdue_count=stats.overdue_count,
    )


@router.get("/houses", response_model=List[HouseStatsResponse])
def list_houses(
    request: Request,
    aggregator: PortfolioAggregator = Depends(get_aggregator),
    now: datetime = Depends(get_reference_time),
):
    """
    List houses, newest first, with tenant count, total rent and
    current-month overdue count.
    """
    start_time = time.time()
    with status_computation_histogram.labels(scope="house").time():
        houses = aggregator.all_house_stats(now)

    log_status_computation(
        get_request_id(request),
        scope="houses",
        tenant_count=sum(h.tenant_count for h in houses),
        overdue_count=sum(h.overdue_count for h in houses),
        reference_month=month_key(now),
        duration_ms=(time.time() - start_time) * 1000,
    )
    return [to_house_stats_response(h) for h in houses]


@router.post("/houses", response_model=HouseResponse, status_code=201)
def create_house(body: HouseCreate, request: Request, db: Session = Depends(get_db)):
    try:
        db_house = HouseRepository(db).create_house(body.name, body.address)
        commit_change(db, request, "house", "created", db_house.id)
    except DomainException as e:
        raise_http_error(db, request, e)

    db.refresh(db_house)
    return HouseResponse.model_validate(db_house)


@router.get("/houses/{house_id}", response_model=HouseDetailResponse)
def get_house(
    house_id: int,
    db: Session = Depends(get_db),
    store: SqlEntityStore = Depends(get_store),
    aggregator: PortfolioAggregator = Depends(get_aggregator),
    now: datetime = Depends(get_reference_time),
):
    """House detail with rooms, tenants and rollups"""
    stats = aggregator.house_stats(house_id, now)
    if stats is None:
        raise HTTPException(status_code=404, detail="House not found")

    rooms = store.get_rooms(house_id)
    tenants = TenantRepository(db).get_tenants(house_id)

    return HouseDetailResponse(
        **to_house_stats_response(stats).model_dump(),
        rooms=[RoomResponse.model_validate(r) for r in rooms],
        tenants=[TenantResponse.model_validate(t) for t in tenants],
    )


@router.patch("/houses/{house_id}", response_model=HouseResponse)
def update_house(house_id: int, body: HouseUpdate, request: Request, db: Session = Depends(get_db)):
    """Update only the supplied fields"""
    try:
        db_house = HouseRepository(db).update_house(house_id, body.model_dump(exclude_unset=True))
        commit_change(db, request, "house", "updated", house_id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return HouseResponse.model_validate(db_house)


@router.delete("/houses/{house_id}", status_code=204)
def delete_house(house_id: int, request: Request, db: Session = Depends(get_db)):
    """Delete a house together with its rooms, tenants and their payments"""
    try:
        HouseRepository(db).delete_house(house_id)
        commit_change(db, request, "house", "deleted", house_id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return Response(status_code=204)


@router.get("/houses/{house_id}/rooms", response_model=List[RoomResponse])
def list_house_rooms(house_id: int, store: SqlEntityStore = Depends(get_store)):
    if store.get_house(house_id) is None:
        raise HTTPException(status_code=404, detail="House not found")
    return [RoomResponse.model_validate(r) for r in store.get_rooms(house_id)]
