"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from assetmx_gateway.config import settings


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

    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_quote(
    request_id: str,
    asset_type: str,
    loan_amount: Decimal,
    term_months: int,
    monthly_repayment: Decimal,
    duration_ms: float,
) -> None:
    """Log structured quote outcome for analysis"""
    logging.info(
        "Quote issued",
        extra={
            "request_id": request_id,
            "step": "quote_complete",
            "asset_type": asset_type,
            "loan_amount": str(loan_amount),
            "term_months": term_months,
            "monthly_repayment": str(monthly_repayment),
            "duration_ms": duration_ms,
        },
    )


def log_eligibility(
    request_id: str,
    passed: bool,
    failed_rules: list[str],
    duration_ms: float,
) -> None:
    """Log structured eligibility outcome for analysis"""
    logging.info(
        "Eligibility evaluated",
        extra={
            "request_id": request_id,
            "step": "eligibility_complete",
            "eligibility_outcome": "eligible" if passed else "ineligible",
            "failed_rules": failed_rules,
            "duration_ms": duration_ms,
        },
    )
