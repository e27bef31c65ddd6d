"""Employee sale recording - commission split, transaction, activity log"""

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Optional
from sqlalchemy.orm import Session
from shopdesk.config import settings
from shopdesk.domain.commission import calculate_commission
from shopdesk.domain.exceptions import ValidationError
from shopdesk.domain.models import ActivityEntry, Employee
from shopdesk.infrastructure.database.models import TransactionModel
from shopdesk.infrastructure.database.repositories import ServiceRepository, TransactionRepository
from shopdesk.infrastructure.database.session import unit_of_work
from shopdesk.infrastructure.observability.logging import log_sale_recorded
from shopdesk.infrastructure.observability.metrics import record_sale as record_sale_metrics
from shopdesk.services.activity import SALE_RECORDED, log_activity

logger = logging.getLogger(__name__)


def format_amount(amount: Decimal) -> str:
    return f"{settings.currency} {amount:,.2f}"


def record_sale(
    db: Session,
    employee: Employee,
    service_id: Optional[uuid.UUID],
    sale_amount: Decimal,
) -> TransactionModel:
    """
    Record a sale made by an employee.

    Flow:
    1. Validate amount and service selection (nothing persisted on failure)
    2. Split the amount with the employee's commission policy
    3. Persist the transaction with is_commission_paid = False
    4. Only after the commit, write one "sale_recorded" activity entry

    A failed commit raises before step 4, so no activity entry exists for a
    transaction that was never stored. A failed activity write is logged and
    does not affect the transaction.
    """
    if service_id is None:
        raise ValidationError("Please select a service")

    try:
        amount = Decimal(sale_amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError("Enter a valid sale amount") from e
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Sale amount must be greater than zero")

    service = ServiceRepository(db).get(service_id)
    if service is None or service.business_id != employee.business_id or not service.is_active:
        raise ValidationError("Selected service is not available")

    split = calculate_commission(amount, employee.policy).rounded()
    if split.exceeds_sale:
        # Fixed commission above the sale amount is allowed; flag it for review
        logger.warning(
            "Commission exceeds sale amount",
            extra={
                "employee_id": str(employee.id),
                "sale_amount": str(amount),
                "commission_amount": str(split.commission),
            },
        )

    with unit_of_work(db, "transaction"):
        db_txn = TransactionRepository(db).create_transaction(
            employee=employee,
            service_id=service_id,
            total_amount=amount,
            split=split,
        )
        transaction_id = db_txn.id

    log_activity(
        db,
        ActivityEntry(
            employee_id=employee.id,
            action=SALE_RECORDED,
            details=f"Recorded sale of {format_amount(amount)}",
        ),
    )

    record_sale_metrics(employee.commission_type.value, split.commission)
    log_sale_recorded(str(transaction_id), str(employee.id), amount, split.commission)

    return db_txn
