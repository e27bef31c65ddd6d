"""/v1/contracts - contract lifecycle endpoints"""

import uuid
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from shopdesk.api.v1.schemas import (
    ContractCreateRequest,
    ContractResponse,
    EmployeeSignRequest,
    EmployerSignRequest,
    TerminateRequest,
)
from shopdesk.api.dependencies import get_identity, get_request_id
from shopdesk.api.errors import to_http_exception
from shopdesk.domain.exceptions import DomainException
from shopdesk.domain.models import Contract, Identity
from shopdesk.domain.receipts import build_contract_document
from shopdesk.infrastructure.database.session import get_db
from shopdesk.services import contracts

router = APIRouter()


def contract_response(contract: Contract) -> ContractResponse:
    return ContractResponse(
        contract_id=contract.id,
        employee_id=contract.employee_id,
        status=contract.status.value,
        version=contract.version,
        document=build_contract_document(contract),
    )


@router.post("/contracts", response_model=ContractResponse, status_code=201)
def create_contract(
    request_body: ContractCreateRequest,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Draft a new contract (owner/admin only)"""
    try:
        contract = contracts.create_contract(
            db,
            identity,
            employee_id=request_body.employee_id,
            title=request_body.title,
            contract_type=request_body.contract_type,
            start_date=request_body.start_date,
            terms=request_body.terms,
            end_date=request_body.end_date,
            salary_amount=request_body.salary_amount,
            salary_frequency=request_body.salary_frequency,
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))
    return contract_response(contract)


@router.get("/contracts/{contract_id}", response_model=ContractResponse)
def get_contract(
    contract_id: uuid.UUID,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Contract with the document payload used for rendering"""
    try:
        contract = contracts.get_contract(db, identity, contract_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))
    return contract_response(contract)


@router.post("/contracts/{contract_id}/sign/employee", response_model=ContractResponse)
def sign_as_employee(
    contract_id: uuid.UUID,
    request_body: EmployeeSignRequest,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    try:
        contract = contracts.sign_as_employee(
            db, identity, contract_id, request_body.signature, request_body.expected_version
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))
    return contract_response(contract)


@router.post("/contracts/{contract_id}/sign/employer", response_model=ContractResponse)
def sign_as_employer(
    contract_id: uuid.UUID,
    request_body: EmployerSignRequest,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    try:
        contract = contracts.sign_as_employer(
            db,
            identity,
            contract_id,
            request_body.signature,
            request_body.employer_name,
            request_body.expected_version,
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))
    return contract_response(contract)


@router.post("/contracts/{contract_id}/terminate", response_model=ContractResponse)
def terminate_contract(
    contract_id: uuid.UUID,
    request_body: TerminateRequest,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Terminate a contract with a reason. Irreversible."""
    try:
        contract = contracts.terminate(
            db, identity, contract_id, request_body.reason, request_body.expected_version
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))
    return contract_response(contract)


@router.post("/contracts/{contract_id}/expire", response_model=ContractResponse)
def expire_contract(
    contract_id: uuid.UUID,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    try:
        contract = contracts.expire(db, identity, contract_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))
    return contract_response(contract)
