"""Receipt and document payloads handed to the PDF renderer"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from shopdesk.domain.models import (
    CartLine,
    CheckoutTotals,
    Contract,
    DebtorSale,
    PaymentOutcome,
    PaymentReceipt,
    ReceiptItem,
    SaleReceipt,
)
from shopdesk.utils.references import generate_payment_receipt_number, sale_receipt_number

WALK_IN_CUSTOMER = "Walk-in Customer"


def build_payment_receipt(
    sale: DebtorSale,
    outcome: PaymentOutcome,
    payment_method: str,
    issued_at: Optional[datetime] = None,
    receipt_number: Optional[str] = None,
) -> PaymentReceipt:
    """
    Snapshot a payment against a debt.

    Captures previously paid, this payment, total paid and remaining balance
    as they stood at application time.
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    return PaymentReceipt(
        receipt_number=receipt_number or generate_payment_receipt_number(int(issued_at.timestamp() * 1000)),
        issued_at=issued_at,
        sale_id=sale.sale_id,
        sale_number=sale.sale_number,
        customer_name=sale.customer_name or WALK_IN_CUSTOMER,
        customer_phone=sale.customer_phone,
        original_total=outcome.before.total_amount,
        previously_paid=outcome.before.amount_paid,
        this_payment=outcome.amount,
        total_paid=outcome.after.amount_paid,
        remaining_balance=outcome.after.balance_due,
        payment_method=payment_method,
    )


def build_sale_receipt(
    sale_id,
    sale_number: str,
    lines: List[CartLine],
    totals: CheckoutTotals,
    payment_method: str,
    customer_name: Optional[str] = None,
    issued_at: Optional[datetime] = None,
) -> SaleReceipt:
    return SaleReceipt(
        receipt_number=sale_receipt_number(sale_id),
        issued_at=issued_at or datetime.now(timezone.utc),
        sale_number=sale_number,
        customer_name=customer_name or WALK_IN_CUSTOMER,
        items=[
            ReceiptItem(
                name=line.service.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                discount=line.discount,
                total=line.total,
            )
            for line in lines
        ],
        subtotal=totals.subtotal,
        tax_amount=totals.tax_amount,
        discount_amount=totals.discount_amount,
        total_amount=totals.total_amount,
        amount_paid=totals.amount_paid,
        balance_due=totals.balance_due,
        payment_method=payment_method,
    )


def build_contract_document(contract: Contract) -> Dict[str, Any]:
    """Contract payload for rendering: terms, dates, salary and both signatures"""
    return {
        "contract_id": str(contract.id),
        "title": contract.title,
        "type": contract.type,
        "status": contract.status.value,
        "terms": contract.terms,
        "start_date": contract.start_date.isoformat(),
        "end_date": contract.end_date.isoformat() if contract.end_date else None,
        "salary_amount": str(contract.salary_amount) if contract.salary_amount is not None else None,
        "salary_frequency": contract.salary_frequency,
        "employee_signature": contract.employee_signature,
        "employee_signed_at": contract.employee_signed_at.isoformat() if contract.employee_signed_at else None,
        "employer_signature": contract.employer_signature,
        "employer_name": contract.employer_name,
        "employer_signed_at": contract.employer_signed_at.isoformat() if contract.employer_signed_at else None,
        "termination_reason": contract.termination_reason,
        "terminated_at": contract.terminated_at.isoformat() if contract.terminated_at else None,
    }
