"""POST /v1/payments/initialize and /v1/payments/verify - hosted checkout"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from shopdesk.api.v1.debtors import payment_response
from shopdesk.api.v1.schemas import (
    PaymentInitializeRequest,
    PaymentInitializeResponse,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
)
from shopdesk.api.dependencies import get_gateway_client, get_identity, get_receipt_client, get_request_id
from shopdesk.api.errors import to_http_exception
from shopdesk.config import settings
from shopdesk.domain.exceptions import DomainException
from shopdesk.domain.models import Identity
from shopdesk.infrastructure.clients.gateway import GatewayClient
from shopdesk.infrastructure.clients.receipts import ReceiptClient
from shopdesk.infrastructure.database.session import get_db
from shopdesk.services.payments import initialize_payment, verify_payment

router = APIRouter()


@router.post("/payments/initialize", response_model=PaymentInitializeResponse, status_code=201)
async def initialize(
    request_body: PaymentInitializeRequest,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    gateway_client: GatewayClient = Depends(get_gateway_client),
):
    """
    Issue a payment intent and return the hosted checkout URL.

    The ledger is only touched once the gateway calls back on /verify.
    """
    try:
        result = await initialize_payment(
            db,
            identity,
            gateway_client,
            sale_id=request_body.sale_id,
            amount=request_body.amount,
            email=request_body.email,
            gateway=request_body.gateway or settings.gateway_name,
            metadata=request_body.metadata,
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return PaymentInitializeResponse(
        reference=result.reference,
        authorization_url=result.authorization_url,
        amount=result.amount,
        gateway=result.gateway,
    )


@router.post("/payments/verify", response_model=PaymentVerifyResponse)
async def verify(
    request_body: PaymentVerifyRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    gateway_client: GatewayClient = Depends(get_gateway_client),
    receipt_client: ReceiptClient = Depends(get_receipt_client),
):
    """Gateway callback carrying {reference, status}"""
    try:
        result = await verify_payment(db, gateway_client, request_body.reference, request_body.status)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    payment = payment_response(result.payment) if result.payment else None
    if payment is not None:
        background_tasks.add_task(
            receipt_client.send_receipt,
            "payment_receipt",
            payment.receipt.model_dump(mode="json"),
        )

    return PaymentVerifyResponse(
        reference=result.reference,
        status=result.status.value,
        already_applied=result.already_applied,
        payment=payment,
    )
