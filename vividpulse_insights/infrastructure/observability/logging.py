"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "vividpulse-insights"


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


def log_insight(
    request_id: str,
    source: str,
    health_score: int,
    transaction_count: int,
    duration_ms: float,
    failure: str | None = None,
) -> None:
    """Log structured insight outcome for analysis (never includes credentials)"""
    logging.info(
        "Insight completed",
        extra={
            "request_id": request_id,
            "step": "insight_complete",
            "source": source,
            "health_score": health_score,
            "transaction_count": transaction_count,
            "remote_failure": failure,
            "duration_ms": duration_ms,
        },
    )
