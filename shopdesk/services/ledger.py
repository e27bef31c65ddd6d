"""Debt ledger operations - payment application and debtor queries"""

import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from sqlalchemy.orm import Session
from shopdesk.domain.exceptions import ConflictError, NotFoundError, ValidationError
from shopdesk.domain.ledger import compute_payment
from shopdesk.domain.models import DebtorSale, Identity, PaymentOutcome, PaymentReceipt
from shopdesk.domain.receipts import build_payment_receipt
from shopdesk.infrastructure.database.models import PaymentModel, SaleModel
from shopdesk.infrastructure.database.repositories import (
    PaymentRepository,
    SaleRepository,
    debtor_view,
    sale_balance,
)
from shopdesk.infrastructure.database.session import unit_of_work
from shopdesk.infrastructure.observability.logging import log_payment_applied
from shopdesk.infrastructure.observability.metrics import record_payment


@dataclass
class PaymentResult:
    sale: SaleModel
    payment: PaymentModel
    outcome: PaymentOutcome
    receipt: PaymentReceipt


def _to_amount(amount) -> Decimal:
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError("Enter a valid payment amount") from e
    if not value.is_finite():
        raise ValidationError("Enter a valid payment amount")
    return value


def stage_payment(
    db: Session,
    business_id: uuid.UUID,
    sale_id: uuid.UUID,
    amount: Decimal,
    method: str,
    expected_version: Optional[int] = None,
    reference: Optional[str] = None,
) -> PaymentResult:
    """
    Stage a payment and the matching sale update without committing.

    The sale is re-read inside the caller's unit of work and the overpayment
    check runs against that fresh row. The sale UPDATE carries the version
    that was read, so a concurrent writer makes the commit fail.
    """
    amount = _to_amount(amount)
    if not method:
        raise ValidationError("Payment method is required")

    sales = SaleRepository(db)
    db_sale = sales.get_sale_for_update(sale_id)
    if db_sale is None or db_sale.business_id != business_id:
        raise NotFoundError("Sale not found")
    if expected_version is not None and db_sale.version != expected_version:
        raise ConflictError("Sale balance changed since it was loaded; refresh and try again")

    before = debtor_view(db_sale)
    outcome = compute_payment(sale_balance(db_sale), amount)

    db_payment = PaymentRepository(db).create_payment(
        sale_id=db_sale.id,
        amount=amount,
        payment_method=method,
        reference=reference,
    )
    sales.apply_balance(db_sale, outcome.after)

    receipt = build_payment_receipt(before, outcome, method)
    return PaymentResult(sale=db_sale, payment=db_payment, outcome=outcome, receipt=receipt)


def apply_payment(
    db: Session,
    identity: Identity,
    sale_id: uuid.UUID,
    amount: Decimal,
    method: str,
    expected_version: Optional[int] = None,
) -> PaymentResult:
    """
    Apply an incremental payment against an outstanding sale.

    The payment row and the sale update commit together or not at all.
    Overpayment (amount > balance_due) and non-positive amounts raise
    ValidationError and leave the sale untouched.
    """
    with unit_of_work(db, "sale"):
        result = stage_payment(
            db,
            business_id=identity.business_id,
            sale_id=sale_id,
            amount=amount,
            method=method,
            expected_version=expected_version,
        )

    record_payment(result.outcome.after.payment_status.value)
    log_payment_applied(
        str(sale_id),
        result.outcome.amount,
        result.outcome.after.balance_due,
        result.outcome.after.payment_status.value,
        result.receipt.receipt_number,
    )
    return result


def list_outstanding(db: Session, business_id: uuid.UUID) -> List[DebtorSale]:
    """All sales of a business with balance_due > 0, newest first"""
    return [debtor_view(row) for row in SaleRepository(db).list_outstanding(business_id)]
