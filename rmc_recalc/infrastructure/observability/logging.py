"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from rmc_recalc.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_extraction(
    request_id: str,
    source: str,
    payment_count: int,
    degraded_dates: bool,
    duration_ms: float,
) -> None:
    """Log structured extraction outcome"""
    logging.info(
        "Extraction completed",
        extra={
            "request_id": request_id,
            "step": "extraction_complete",
            "source": source,
            "payment_count": payment_count,
            "degraded_dates": degraded_dates,
            "duration_ms": duration_ms,
        },
    )


def log_calculation(
    request_id: str,
    calculation_id: str,
    payment_count: int,
    total_restitution_cents: int,
    duration_ms: float,
) -> None:
    """Log structured recalculation outcome for analysis"""
    logging.info(
        "Calculation completed",
        extra={
            "request_id": request_id,
            "calculation_id": calculation_id,
            "step": "calculation_complete",
            "payment_count": payment_count,
            "total_restitution_cents": total_restitution_cents,
            "duration_ms": duration_ms,
        },
    )
