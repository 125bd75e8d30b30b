"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from payout_gateway.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.utcnow().isoformat()
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


def log_payout_submitted(
    request_id: str,
    reference_id: str,
    idempotency_key: str,
    succeeded: bool,
    duration_ms: float,
) -> None:
    """Log structured payout outcome; the signature and credentials stay out of logs"""
    logging.info(
        "Payout submitted",
        extra={
            "request_id": request_id,
            "reference_id": reference_id,
            "idempotency_key": idempotency_key,
            "step": "payout_submitted",
            "payout_outcome": "succeeded" if succeeded else "pending_or_failed",
            "duration_ms": duration_ms,
        },
    )
