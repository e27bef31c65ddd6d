"""POST /v1/sales/record and POST /v1/checkout - sale entry endpoints"""

import uuid
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from shopdesk.api.v1.schemas import (
    CheckoutRequest,
    CheckoutResponse,
    RecordSaleRequest,
    SaleReceiptSchema,
    TransactionHistoryResponse,
    TransactionResponse,
)
from shopdesk.api.dependencies import get_identity, get_receipt_client, get_request_id
from shopdesk.api.errors import to_http_exception
from shopdesk.domain.exceptions import DomainException
from shopdesk.domain.models import Identity
from shopdesk.infrastructure.clients.receipts import ReceiptClient
from shopdesk.infrastructure.database.session import get_db
from shopdesk.infrastructure.database.repositories import (
    EmployeeRepository,
    TransactionRepository,
    employee_to_domain,
)
from shopdesk.services.checkout import LineRequest, checkout
from shopdesk.services.recorder import record_sale

router = APIRouter()


def _resolve_employee(db: Session, identity: Identity, employee_id: uuid.UUID | None):
    """The caller records their own sales; owners/admins may record for any employee"""
    if employee_id is None:
        try:
            employee_id = uuid.UUID(identity.user_id)
        except ValueError:
            raise HTTPException(status_code=400, detail="Caller is not an employee")
    elif str(employee_id) != identity.user_id and not identity.can_administer:
        raise HTTPException(status_code=403, detail="Cannot record sales for another employee")

    employee = EmployeeRepository(db).get(employee_id)
    if employee is None or employee.business_id != identity.business_id:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee_to_domain(employee)


@router.post("/sales/record", response_model=TransactionResponse, status_code=201)
def record_employee_sale(
    request_body: RecordSaleRequest,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Record a sale for an employee and split the commission.

    Flow:
    1. Resolve the employee and their commission policy
    2. Validate and persist the transaction
    3. Write the "sale_recorded" activity entry
    """
    employee = _resolve_employee(db, identity, request_body.employee_id)

    try:
        db_txn = record_sale(db, employee, request_body.service_id, request_body.sale_amount)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return TransactionResponse.model_validate(db_txn)


@router.get("/employees/{employee_id}/transactions", response_model=TransactionHistoryResponse)
def get_transactions(
    employee_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Recent commission transactions for an employee"""
    employee = _resolve_employee(db, identity, employee_id)
    rows = TransactionRepository(db).get_by_employee(employee.id, limit=20)
    return TransactionHistoryResponse(
        employee_id=employee.id,
        transactions=[TransactionResponse.model_validate(row) for row in rows],
    )


@router.post("/checkout", response_model=CheckoutResponse, status_code=201)
def create_checkout(
    request_body: CheckoutRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    receipt_client: ReceiptClient = Depends(get_receipt_client),
):
    """
    Ring up a cart. Anything left unpaid opens a debt on the ledger.

    The sale receipt is handed to the renderer in the background.
    """
    lines = [
        LineRequest(
            service_id=line.service_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            discount=line.discount,
        )
        for line in request_body.lines
    ]

    try:
        result = checkout(
            db,
            identity,
            lines,
            payment_method=request_body.payment_method,
            amount_paid=request_body.amount_paid,
            customer_id=request_body.customer_id,
            notes=request_body.notes,
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    receipt = SaleReceiptSchema.model_validate(result.receipt)
    background_tasks.add_task(receipt_client.send_receipt, "sale_receipt", receipt.model_dump(mode="json"))

    return CheckoutResponse(
        sale_id=result.sale.id,
        sale_number=result.sale.sale_number,
        payment_status=result.sale.payment_status,
        balance_due=result.sale.balance_due,
        receipt=receipt,
    )
