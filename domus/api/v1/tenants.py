"""/v1/tenants - Tenant management and payment status"""

import time
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from domus.api.v1.schemas import (
    HouseSummary,
    MONTH_REGEX,
    PaymentResponse,
    RoomSummary,
    TenantCreate,
    TenantListItem,
    TenantResponse,
    TenantStatusResponse,
    TenantUpdate,
)
from domus.api.dependencies import (
    commit_change,
    get_reference_time,
    get_request_id,
    get_status_engine,
    raise_http_error,
)
from domus.domain.exceptions import DomainException
from domus.domain.payment_status import PaymentStatusEngine
from domus.infrastructure.database.models import TenantRecord
from domus.infrastructure.database.session import get_db
from domus.infrastructure.database.repositories import RoomRepository, TenantRepository
from domus.infrastructure.observability.logging import log_status_computation
from domus.infrastructure.observability.metrics import status_computation_histogram
from domus.utils.date_utils import month_key

router = APIRouter()


def to_tenant_list_item(db_tenant: TenantRecord, engine: PaymentStatusEngine, now: datetime) -> TenantListItem:
    """Tenant row with house, room and recency badge"""
    recency = engine.recency_status(db_tenant.to_domain(), now)
    last = recency.last_payment

    return TenantListItem(
        **TenantResponse.model_validate(db_tenant).model_dump(),
        house=HouseSummary.model_validate(db_tenant.house) if db_tenant.house else None,
        room=RoomSummary.model_validate(db_tenant.room) if db_tenant.room else None,
        last_payment=(
            PaymentResponse(
                id=last.id,
                tenant_id=last.tenant_id,
                month=last.month,
                amount=float(last.amount),
                paid_at=last.paid_at,
                notes=last.notes,
            )
            if last
            else None
        ),
        payment_status=recency.status,
        months_since_last_payment=recency.months_since_last_payment,
    )


@router.get("/tenants", response_model=List[TenantListItem])
def list_tenants(
    request: Request,
    house_id: Optional[int] = Query(None, description="Restrict to one house"),
    db: Session = Depends(get_db),
    engine: PaymentStatusEngine = Depends(get_status_engine),
    now: datetime = Depends(get_reference_time),
):
    """
    List tenants by entry date, most recent first.

    payment_status here is the recency badge (months since last payment),
    not the current-month status used by the dashboard.
    """
    start_time = time.time()
    with status_computation_histogram.labels(scope="tenants").time():
        items = [to_tenant_list_item(t, engine, now) for t in TenantRepository(db).get_tenants(house_id)]

    log_status_computation(
        get_request_id(request),
        scope="tenant_list",
        tenant_count=len(items),
        overdue_count=sum(1 for item in items if item.payment_status == "overdue"),
        reference_month=month_key(now),
        duration_ms=(time.time() - start_time) * 1000,
    )
    return items


@router.post("/tenants", response_model=TenantResponse, status_code=201)
def create_tenant(body: TenantCreate, request: Request, db: Session = Depends(get_db)):
    """Create the tenant and its room in a single transaction"""
    try:
        db_tenant = TenantRepository(db).create_tenant_with_room(
            house_id=body.house_id,
            room_name=body.room_name,
            room_type=body.room_type,
            first_name=body.first_name,
            last_name=body.last_name,
            phone=body.phone,
            email=body.email,
            entry_date=body.entry_date,
            payment_frequency=body.payment_frequency,
            rent_amount=Decimal(str(body.rent_amount)),
        )
        commit_change(db, request, "tenant", "created", db_tenant.id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return TenantResponse.model_validate(db_tenant)


@router.get("/tenants/{tenant_id}", response_model=TenantListItem)
def get_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    engine: PaymentStatusEngine = Depends(get_status_engine),
    now: datetime = Depends(get_reference_time),
):
    db_tenant = TenantRepository(db).get_tenant_by_id(tenant_id)
    if db_tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return to_tenant_list_item(db_tenant, engine, now)


@router.get("/tenants/{tenant_id}/status", response_model=TenantStatusResponse)
def get_tenant_status(
    tenant_id: int,
    month: Optional[str] = Query(None, pattern=MONTH_REGEX, description="Also report whether this month is paid"),
    engine: PaymentStatusEngine = Depends(get_status_engine),
    now: datetime = Depends(get_reference_time),
):
    """Current-month payment status, optionally with the paid flag of a given month"""
    status = engine.status_for_tenant(tenant_id, now)
    if status is None:
        raise HTTPException(status_code=404, detail="Tenant not found")

    return TenantStatusResponse(
        tenant_id=status.tenant_id,
        status=status.status,
        reference_month=status.reference_month,
        entry_month=status.entry_month,
        month=month,
        month_paid=engine.is_month_paid(tenant_id, month) if month else None,
    )


@router.patch("/tenants/{tenant_id}", response_model=TenantResponse)
def update_tenant(tenant_id: int, body: TenantUpdate, request: Request, db: Session = Depends(get_db)):
    """Update supplied tenant fields; room_name/room_type apply to the tenant's room"""
    fields = body.model_dump(exclude_unset=True)
    room_fields = {
        key: fields.pop(f"room_{key}")
        for key in ("name", "type")
        if f"room_{key}" in fields
    }
    if fields.get("rent_amount") is not None:
        fields["rent_amount"] = Decimal(str(fields["rent_amount"]))

    try:
        db_tenant = TenantRepository(db).update_tenant(tenant_id, fields)
        if room_fields:
            RoomRepository(db).update_room(db_tenant.room_id, room_fields)
        commit_change(db, request, "tenant", "updated", tenant_id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return TenantResponse.model_validate(db_tenant)


@router.delete("/tenants/{tenant_id}", status_code=204)
def delete_tenant(tenant_id: int, request: Request, db: Session = Depends(get_db)):
    """Delete a tenant and their payments"""
    try:
        TenantRepository(db).delete_tenant(tenant_id)
        commit_change(db, request, "tenant", "deleted", tenant_id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return Response(status_code=204)
