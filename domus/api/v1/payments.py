"""/v1/payments - Rent payments and current-month overdue list"""

import time
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from domus.api.v1.schemas import (
    HouseSummary,
    MONTH_REGEX,
    OverdueItem,
    OverdueResponse,
    PaymentCreate,
    PaymentListItem,
    PaymentResponse,
    PaymentUpdate,
    RoomSummary,
    TenantResponse,
)
from domus.api.dependencies import (
    commit_change,
    get_reference_time,
    get_request_id,
    get_status_engine,
    get_store,
    raise_http_error,
)
from domus.domain.exceptions import DomainException
from domus.domain.payment_status import PaymentStatusEngine
from domus.infrastructure.database.session import get_db
from domus.infrastructure.database.repositories import PaymentRepository, SqlEntityStore
from domus.infrastructure.observability.logging import log_status_computation
from domus.infrastructure.observability.metrics import status_computation_histogram
from domus.utils.date_utils import month_key

router = APIRouter()


@router.get("/payments", response_model=List[PaymentListItem])
def list_payments(
    tenant_id: Optional[int] = Query(None),
    month: Optional[str] = Query(None, pattern=MONTH_REGEX),
    db: Session = Depends(get_db),
):
    """Payments newest first with the paying tenant's house and room"""
    repo = PaymentRepository(db)
    if tenant_id is not None and month is not None:
        payments = repo.get_payments_by_month(tenant_id, month)
    else:
        payments = repo.get_payments(tenant_id)
        if month is not None:
            payments = [p for p in payments if p.month == month]

    items = []
    for p in payments:
        tenant = p.tenant
        items.append(
            PaymentListItem(
                **PaymentResponse.model_validate(p).model_dump(),
                tenant=TenantResponse.model_validate(tenant) if tenant else None,
                house=HouseSummary.model_validate(tenant.house) if tenant and tenant.house else None,
                room=RoomSummary.model_validate(tenant.room) if tenant and tenant.room else None,
            )
        )
    return items


@router.get("/payments/overdue", response_model=OverdueResponse)
def list_overdue(
    request: Request,
    store: SqlEntityStore = Depends(get_store),
    engine: PaymentStatusEngine = Depends(get_status_engine),
    now: datetime = Depends(get_reference_time),
):
    """Tenants who entered before this month and have no payment recorded for it"""
    start_time = time.time()
    with status_computation_histogram.labels(scope="overdue").time():
        tenants = store.get_tenants()
        entries = engine.overdue_entries(tenants, now)

    reference_month = month_key(now)
    log_status_computation(
        get_request_id(request),
        scope="overdue_list",
        tenant_count=len(tenants),
        overdue_count=len(entries),
        reference_month=reference_month,
        duration_ms=(time.time() - start_time) * 1000,
    )

    return OverdueResponse(
        reference_month=reference_month,
        total_amount=float(sum((e.amount for e in entries), Decimal("0"))),
        items=[
            OverdueItem(
                tenant=TenantResponse.model_validate(e.tenant, from_attributes=True),
                month=e.month,
                amount=float(e.amount),
            )
            for e in entries
        ],
    )


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def create_payment(body: PaymentCreate, request: Request, db: Session = Depends(get_db)):
    try:
        db_payment = PaymentRepository(db).create_payment(
            tenant_id=body.tenant_id,
            month=body.month,
            amount=Decimal(str(body.amount)),
            notes=body.notes,
        )
        commit_change(db, request, "payment", "created", db_payment.id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return PaymentResponse.model_validate(db_payment)


@router.patch("/payments/{payment_id}", response_model=PaymentResponse)
def update_payment(payment_id: int, body: PaymentUpdate, request: Request, db: Session = Depends(get_db)):
    fields = body.model_dump(exclude_unset=True)
    if "amount" in fields and fields["amount"] is not None:
        fields["amount"] = Decimal(str(fields["amount"]))

    try:
        db_payment = PaymentRepository(db).update_payment(payment_id, fields)
        commit_change(db, request, "payment", "updated", payment_id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return PaymentResponse.model_validate(db_payment)


@router.delete("/payments/{payment_id}", status_code=204)
def delete_payment(payment_id: int, request: Request, db: Session = Depends(get_db)):
    try:
        PaymentRepository(db).delete_payment(payment_id)
        commit_change(db, request, "payment", "deleted", payment_id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return Response(status_code=204)
