"""Hosted-checkout payments - intent creation and verification callback

Verification is not a separate ledger path: a confirmed intent runs the same
staged payment as a cashier-entered one, in the same unit of work that marks
the intent successful.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Mapping, Optional
from sqlalchemy.orm import Session
from shopdesk.domain.exceptions import (
    ConflictError,
    DomainException,
    NotFoundError,
    PaymentGatewayError,
    ValidationError,
)
from shopdesk.domain.gateway import from_minor_units, parse_metadata, to_minor_units, validate_gateway
from shopdesk.domain.ledger import validate_payment_amount
from shopdesk.domain.models import Identity, IntentStatus
from shopdesk.infrastructure.clients.gateway import GatewayClient
from shopdesk.infrastructure.database.models import PaymentIntentModel
from shopdesk.infrastructure.database.repositories import PaymentIntentRepository, SaleRepository, sale_balance
from shopdesk.infrastructure.database.session import unit_of_work
from shopdesk.infrastructure.observability.logging import log_payment_applied
from shopdesk.infrastructure.observability.metrics import gateway_failures_counter, record_payment
from shopdesk.services.ledger import PaymentResult, stage_payment
from shopdesk.utils.references import generate_payment_reference

logger = logging.getLogger(__name__)


@dataclass
class IntentResult:
    reference: str
    authorization_url: str
    amount: Decimal
    gateway: str


@dataclass
class VerificationResult:
    reference: str
    status: IntentStatus
    already_applied: bool = False
    payment: Optional[PaymentResult] = None


def _set_status(db: Session, intent: PaymentIntentModel, status: IntentStatus, response: Optional[dict] = None) -> None:
    with unit_of_work(db, "payment intent"):
        intent.status = status.value
        if response is not None:
            intent.gateway_response = response


async def initialize_payment(
    db: Session,
    identity: Identity,
    gateway_client: GatewayClient,
    sale_id: uuid.UUID,
    amount: Decimal,
    email: str,
    gateway: str,
    metadata: Optional[Mapping[str, Any]] = None,
) -> IntentResult:
    """
    Issue a payment intent against an outstanding sale.

    Flow:
    1. Validate gateway, metadata record and amount against the balance
    2. Record a pending intent under a fresh reference
    3. Ask the gateway for a hosted checkout URL
    """
    validate_gateway(gateway)
    record = parse_metadata(metadata)
    amount = Decimal(amount)
    if not email:
        raise ValidationError("Customer email is required")

    db_sale = SaleRepository(db).get_sale(sale_id)
    if db_sale is None or db_sale.business_id != identity.business_id:
        raise NotFoundError("Sale not found")
    validate_payment_amount(sale_balance(db_sale), amount)

    reference = generate_payment_reference()
    record = replace(
        record,
        sale_id=str(db_sale.id),
        business_id=str(db_sale.business_id),
        sale_number=db_sale.sale_number,
    )

    with unit_of_work(db, "payment intent"):
        intent = PaymentIntentRepository(db).create_intent(
            business_id=identity.business_id,
            sale_id=db_sale.id,
            reference=reference,
            amount=amount,
            gateway=gateway,
            email=email,
            metadata=record.as_dict(),
        )

    try:
        url = await gateway_client.initialize(email, to_minor_units(amount), reference, record.as_dict())
    except PaymentGatewayError:
        gateway_failures_counter.labels(operation="initialize").inc()
        _set_status(db, intent, IntentStatus.FAILED)
        raise

    return IntentResult(reference=reference, authorization_url=url, amount=amount, gateway=gateway)


async def verify_payment(
    db: Session,
    gateway_client: GatewayClient,
    reference: str,
    reported_status: str,
) -> VerificationResult:
    """
    Handle the gateway's out-of-band callback for a reference.

    - unknown reference: NotFoundError
    - already successful: idempotent, nothing applied twice
    - another callback mid-verification: ConflictError, nothing applied
    - reported failure or gateway says not paid: intent failed, ledger untouched
    - confirmed: payment applied exactly like apply_payment, intent successful
    """
    repo = PaymentIntentRepository(db)
    intent = repo.get_by_reference(reference)
    if intent is None:
        raise NotFoundError("Payment reference not found")

    if intent.status == IntentStatus.SUCCESSFUL.value:
        return VerificationResult(reference=reference, status=IntentStatus.SUCCESSFUL, already_applied=True)

    if reported_status != "success":
        _set_status(db, intent, IntentStatus.FAILED)
        return VerificationResult(reference=reference, status=IntentStatus.FAILED)

    # Claim before the gateway round trip; a second callback for the same
    # reference must not reach stage_payment while this one is suspended.
    with unit_of_work(db, "payment intent"):
        claimed = repo.claim_for_verification(reference)
    intent = repo.get_by_reference(reference)
    if not claimed:
        if intent.status == IntentStatus.SUCCESSFUL.value:
            return VerificationResult(reference=reference, status=IntentStatus.SUCCESSFUL, already_applied=True)
        raise ConflictError("Payment verification already in progress")

    try:
        verification = await gateway_client.verify(reference)
    except PaymentGatewayError:
        gateway_failures_counter.labels(operation="verify").inc()
        _set_status(db, intent, IntentStatus.PENDING)
        raise

    response = {
        "reference": verification.reference,
        "status": verification.status,
        "amount": verification.amount_minor,
        "channel": verification.channel,
    }

    if not verification.succeeded:
        _set_status(db, intent, IntentStatus.FAILED, response)
        return VerificationResult(reference=reference, status=IntentStatus.FAILED)

    if from_minor_units(verification.amount_minor) != Decimal(intent.amount):
        _set_status(db, intent, IntentStatus.FAILED, response)
        raise ValidationError("Verified amount does not match the payment intent")

    try:
        with unit_of_work(db, "sale"):
            result = stage_payment(
                db,
                business_id=intent.business_id,
                sale_id=intent.sale_id,
                amount=Decimal(intent.amount),
                method=intent.gateway,
                reference=reference,
            )
            intent.status = IntentStatus.SUCCESSFUL.value
            intent.gateway_response = response
    except DomainException as e:
        logger.error(f"Verified payment could not be applied: {e}", extra={"reference": reference})
        _set_status(db, intent, IntentStatus.FAILED, response)
        raise

    record_payment(result.outcome.after.payment_status.value)
    log_payment_applied(
        str(intent.sale_id),
        result.outcome.amount,
        result.outcome.after.balance_due,
        result.outcome.after.payment_status.value,
        result.receipt.receipt_number,
    )
    return VerificationResult(reference=reference, status=IntentStatus.SUCCESSFUL, payment=result)
