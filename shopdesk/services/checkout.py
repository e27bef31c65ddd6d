"""POS checkout - opens a sale on the ledger, fully or partially paid"""

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from shopdesk.domain.exceptions import ValidationError
from shopdesk.domain.ledger import compute_checkout_totals
from shopdesk.domain.models import CartLine, Identity, SaleReceipt
from shopdesk.domain.receipts import build_sale_receipt
from shopdesk.infrastructure.database.models import SaleModel
from shopdesk.infrastructure.database.repositories import (
    CustomerRepository,
    PaymentRepository,
    SaleRepository,
    ServiceRepository,
    service_to_domain,
)
from shopdesk.infrastructure.database.session import unit_of_work
from shopdesk.infrastructure.observability.metrics import checkout_counter
from shopdesk.utils.references import generate_sale_number


@dataclass
class LineRequest:
    service_id: uuid.UUID
    quantity: int = 1
    unit_price: Optional[Decimal] = None  # defaults to the catalog price
    discount: Decimal = Decimal("0")


@dataclass
class CheckoutResult:
    sale: SaleModel
    receipt: SaleReceipt


def checkout(
    db: Session,
    identity: Identity,
    lines: List[LineRequest],
    payment_method: str,
    amount_paid: Optional[Decimal] = None,
    customer_id: Optional[uuid.UUID] = None,
    notes: Optional[str] = None,
) -> CheckoutResult:
    """
    Create a sale from a cart.

    Sale, line items and the opening payment (when anything was paid) are one
    unit of work. A balance left over makes the sale a debtor.
    """
    if not lines:
        raise ValidationError("Cart is empty")
    if not payment_method:
        raise ValidationError("Payment method is required")

    catalog = {
        row.id: service_to_domain(row)
        for row in ServiceRepository(db).get_many(line.service_id for line in lines)
    }

    cart: List[CartLine] = []
    for line in lines:
        service = catalog.get(line.service_id)
        if service is None or service.business_id != identity.business_id or not service.active:
            raise ValidationError("Selected service is not available")
        cart.append(
            CartLine(
                service=service,
                quantity=line.quantity,
                unit_price=service.base_price if line.unit_price is None else Decimal(line.unit_price),
                discount=Decimal(line.discount),
            )
        )

    customer_name = None
    if customer_id is not None:
        customer = CustomerRepository(db).get(customer_id)
        if customer is None or customer.business_id != identity.business_id:
            raise ValidationError("Customer not found")
        customer_name = customer.name

    totals = compute_checkout_totals(cart, amount_paid)
    sale_number = generate_sale_number()

    with unit_of_work(db, "sale"):
        db_sale = SaleRepository(db).create_sale(
            business_id=identity.business_id,
            sale_number=sale_number,
            totals=totals,
            lines=cart,
            payment_method=payment_method,
            customer_id=customer_id,
            employee_id=_employee_id(identity),
            notes=notes,
        )
        if totals.amount_paid > 0:
            PaymentRepository(db).create_payment(
                sale_id=db_sale.id,
                amount=totals.amount_paid,
                payment_method=payment_method,
            )
        sale_id = db_sale.id

    checkout_counter.labels(payment_status=totals.payment_status.value).inc()

    receipt = build_sale_receipt(
        sale_id=sale_id,
        sale_number=sale_number,
        lines=cart,
        totals=totals,
        payment_method=payment_method,
        customer_name=customer_name,
    )
    return CheckoutResult(sale=db_sale, receipt=receipt)


def _employee_id(identity: Identity) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(identity.user_id)
    except ValueError:
        return None
