"""Dependency injection and shared helpers for FastAPI endpoints"""

import logging
from datetime import date, datetime, time
from typing import Optional
from fastapi import Depends, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from domus.config import settings
from domus.domain.aggregation import PortfolioAggregator
from domus.domain.exceptions import DomainException, NotFoundError, StoreUnavailableError, ValidationError
from domus.domain.payment_status import PaymentStatusEngine
from domus.infrastructure.database.repositories import SqlEntityStore
from domus.infrastructure.database.session import get_db
from domus.infrastructure.events import refresh_signal
from domus.infrastructure.observability.logging import log_mutation
from domus.infrastructure.observability.metrics import record_mutation


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store(db: Session = Depends(get_db)) -> SqlEntityStore:
    """Provide read snapshot over the request's session"""
    return SqlEntityStore(db)


def get_status_engine(store: SqlEntityStore = Depends(get_store)) -> PaymentStatusEngine:
    return PaymentStatusEngine(store, recency_max_months=settings.recency_overdue_months)


def get_aggregator(
    store: SqlEntityStore = Depends(get_store),
    engine: PaymentStatusEngine = Depends(get_status_engine),
) -> PortfolioAggregator:
    return PortfolioAggregator(store, engine, rooms_per_house=settings.nominal_rooms_per_house)


def get_reference_time(
    as_of: Optional[date] = Query(None, description="Evaluate statuses as of this date instead of now"),
) -> datetime:
    """Reference instant for status computation"""
    if as_of is None:
        return datetime.now()
    return datetime.combine(as_of, time.min)


def commit_change(
    db: Session,
    request: Request,
    entity: str,
    action: str,
    entity_id: int | None = None,
) -> None:
    """Commit the session, then publish the refresh signal and record the write"""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError(f"Write rejected by store constraints: {e.orig}") from e
    except OperationalError as e:
        db.rollback()
        raise StoreUnavailableError(str(e.orig)) from e

    change = refresh_signal.publish(entity, action, entity_id)
    record_mutation(entity, action)
    log_mutation(get_request_id(request), entity, action, entity_id, change.version)


def raise_http_error(db: Session, request: Request, error: DomainException) -> None:
    """Roll back and translate a domain error into an HTTP error"""
    db.rollback()
    request_id = get_request_id(request)

    if isinstance(error, NotFoundError):
        logging.info(f"Not found: {error}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(error)) from error
    if isinstance(error, StoreUnavailableError):
        logging.error(f"Store unavailable: {error}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Storage unavailable") from error

    logging.warning(f"Validation failed: {error}", extra={"request_id": request_id})
    raise HTTPException(status_code=422, detail=str(error)) from error
