"""GET /v1/debtors and POST /v1/sales/{sale_id}/payments - debt ledger endpoints"""

import uuid
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session

from shopdesk.api.v1.schemas import (
    DebtorSchema,
    DebtorsResponse,
    PaymentReceiptSchema,
    PaymentRequest,
    PaymentResponse,
)
from shopdesk.api.dependencies import get_identity, get_receipt_client, get_request_id
from shopdesk.api.errors import to_http_exception
from shopdesk.domain.exceptions import DomainException
from shopdesk.domain.ledger import filter_debtors, summarize_outstanding
from shopdesk.domain.models import Identity
from shopdesk.infrastructure.clients.receipts import ReceiptClient
from shopdesk.infrastructure.database.session import get_db
from shopdesk.services.ledger import PaymentResult, apply_payment, list_outstanding

router = APIRouter()


def payment_response(result: PaymentResult) -> PaymentResponse:
    after = result.outcome.after
    return PaymentResponse(
        sale_id=result.receipt.sale_id,
        amount_paid=after.amount_paid,
        balance_due=after.balance_due,
        payment_status=after.payment_status.value,
        version=result.sale.version,
        receipt=PaymentReceiptSchema.model_validate(result.receipt),
    )


@router.get("/debtors", response_model=DebtorsResponse)
def get_debtors(
    q: str = Query("", description="Customer name, phone or sale number"),
    status: str = Query("all", pattern="^(all|partial)$"),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Outstanding sales for the caller's business, newest first.

    Search and status filtering narrow the list only; the summary is
    computed over the filtered rows.
    """
    debtors = filter_debtors(list_outstanding(db, identity.business_id), q, status)
    summary = summarize_outstanding(debtors)

    return DebtorsResponse(
        total_outstanding=summary.total_outstanding,
        debtor_count=summary.debtor_count,
        walk_in_count=summary.walk_in_count,
        debtors=[DebtorSchema.model_validate(d) for d in debtors],
    )


@router.post("/sales/{sale_id}/payments", response_model=PaymentResponse, status_code=201)
def record_payment(
    sale_id: uuid.UUID,
    request_body: PaymentRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    receipt_client: ReceiptClient = Depends(get_receipt_client),
):
    """
    Apply a partial or full payment to an outstanding sale.

    Errors:
        422 on non-positive amount or overpayment
        409 when the sale changed since expected_version was read
    """
    try:
        result = apply_payment(
            db,
            identity,
            sale_id,
            request_body.amount,
            request_body.method,
            expected_version=request_body.expected_version,
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    response = payment_response(result)
    background_tasks.add_task(
        receipt_client.send_receipt,
        "payment_receipt",
        response.receipt.model_dump(mode="json"),
    )
    return response
