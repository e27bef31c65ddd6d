"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from shopdesk.config import settings


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


def log_sale_recorded(
    transaction_id: str,
    employee_id: str,
    total_amount: Decimal,
    commission_amount: Decimal,
) -> None:
    """Log structured sale recording outcome"""
    logging.getLogger("shopdesk.sales").info(
        "Sale recorded",
        extra={
            "step": "sale_recorded",
            "transaction_id": transaction_id,
            "employee_id": employee_id,
            "total_amount": str(total_amount),
            "commission_amount": str(commission_amount),
        },
    )


def log_payment_applied(
    sale_id: str,
    amount: Decimal,
    balance_due: Decimal,
    payment_status: str,
    receipt_number: str,
) -> None:
    """Log structured ledger write for reconciliation"""
    logging.getLogger("shopdesk.ledger").info(
        "Payment applied",
        extra={
            "step": "payment_applied",
            "sale_id": sale_id,
            "amount": str(amount),
            "balance_due": str(balance_due),
            "payment_status": payment_status,
            "receipt_number": receipt_number,
        },
    )


def log_contract_transition(contract_id: str, from_status: str, to_status: str, actor: str) -> None:
    logging.getLogger("shopdesk.contracts").info(
        "Contract transition",
        extra={
            "step": "contract_transition",
            "contract_id": contract_id,
            "from_status": from_status,
            "to_status": to_status,
            "actor": actor,
        },
    )
