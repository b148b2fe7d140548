"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from domus.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_status_computation(
    request_id: str,
    scope: str,
    tenant_count: int,
    overdue_count: int,
    reference_month: str,
    duration_ms: float,
) -> None:
    """Log structured outcome of a payment status rollup"""
    logging.info(
        "Payment status computed",
        extra={
            "request_id": request_id,
            "step": "status_rollup",
            "scope": scope,
            "tenant_count": tenant_count,
            "overdue_count": overdue_count,
            "reference_month": reference_month,
            "duration_ms": duration_ms,
        },
    )


def log_mutation(request_id: str, entity: str, action: str, entity_id: int | None, version: int) -> None:
    """Log a committed write and the data version it produced"""
    logging.info(
        f"{entity.capitalize()} {action}",
        extra={
            "request_id": request_id,
            "entity": entity,
            "action": action,
            "entity_id": entity_id,
            "data_version": version,
        },
    )
