"""Data version polling and database reset"""

import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from domus.api.v1.schemas import RefreshResponse
from domus.api.dependencies import get_request_id
from domus.infrastructure.database.session import get_db, reset_db
from domus.infrastructure.events import refresh_signal
from domus.infrastructure.observability.metrics import record_mutation

router = APIRouter()


@router.get("/refresh", response_model=RefreshResponse)
def get_refresh_version():
    """Clients reload their views when this version differs from the one they rendered"""
    return RefreshResponse(version=refresh_signal.version)


@router.post("/admin/reset", response_model=RefreshResponse)
def reset_database(request: Request, db: Session = Depends(get_db)):
    """Drop and recreate every table. Irreversible."""
    db.close()
    reset_db(db.get_bind())

    change = refresh_signal.publish("database", "reset")
    record_mutation("database", "reset")
    logging.warning("Database reset", extra={"request_id": get_request_id(request), "data_version": change.version})
    return RefreshResponse(version=change.version)
