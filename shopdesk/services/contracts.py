"""Contract lifecycle operations - creation, signatures, termination, expiry"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Callable, Optional
from sqlalchemy.orm import Session
from shopdesk.domain import contracts as lifecycle
from shopdesk.domain.exceptions import AuthorizationError, ConflictError, NotFoundError
from shopdesk.domain.models import Contract, ContractStatus, Identity
from shopdesk.infrastructure.database.repositories import (
    ContractRepository,
    EmployeeRepository,
    contract_to_domain,
)
from shopdesk.infrastructure.database.session import unit_of_work
from shopdesk.infrastructure.observability.logging import log_contract_transition
from shopdesk.infrastructure.observability.metrics import contract_transitions_counter


def _require_admin(identity: Identity, action: str) -> None:
    if not identity.can_administer:
        raise AuthorizationError(f"Only the business owner or an admin can {action}")


def create_contract(
    db: Session,
    identity: Identity,
    employee_id: uuid.UUID,
    title: str,
    contract_type: str,
    start_date: date,
    terms: str,
    end_date: Optional[date] = None,
    salary_amount: Optional[Decimal] = None,
    salary_frequency: Optional[str] = None,
) -> Contract:
    """Create a draft contract for an employee of the caller's business"""
    _require_admin(identity, "create contracts")
    lifecycle.validate_new_contract(title, terms, start_date, end_date, salary_amount)

    employee = EmployeeRepository(db).get(employee_id)
    if employee is None or employee.business_id != identity.business_id:
        raise NotFoundError("Employee not found")

    contract = Contract(
        id=uuid.uuid4(),
        employee_id=employee_id,
        business_id=identity.business_id,
        title=title.strip(),
        type=contract_type,
        start_date=start_date,
        end_date=end_date,
        terms=terms,
        salary_amount=salary_amount,
        salary_frequency=salary_frequency if salary_amount is not None else None,
        status=ContractStatus.DRAFT,
    )

    with unit_of_work(db, "contract"):
        db_contract = ContractRepository(db).create_contract(contract)

    return contract_to_domain(db_contract)


def get_contract(db: Session, identity: Identity, contract_id: uuid.UUID) -> Contract:
    db_contract = ContractRepository(db).get_contract(contract_id)
    if db_contract is None or db_contract.business_id != identity.business_id:
        raise NotFoundError("Contract not found")
    return contract_to_domain(db_contract)


def _transition(
    db: Session,
    identity: Identity,
    contract_id: uuid.UUID,
    expected_version: Optional[int],
    authorize: Callable[[Contract], None],
    apply: Callable[[Contract], Contract],
) -> Contract:
    """Read-check-write one contract transition inside a single unit of work"""
    repo = ContractRepository(db)
    with unit_of_work(db, "contract"):
        db_contract = repo.get_contract(contract_id, for_update=True)
        if db_contract is None or db_contract.business_id != identity.business_id:
            raise NotFoundError("Contract not found")
        if expected_version is not None and db_contract.version != expected_version:
            raise ConflictError("Contract changed since it was loaded; refresh and try again")

        current = contract_to_domain(db_contract)
        authorize(current)
        updated = apply(current)
        repo.save_transition(db_contract, updated)

    contract_transitions_counter.labels(to_status=updated.status.value).inc()
    log_contract_transition(str(contract_id), current.status.value, updated.status.value, identity.user_id)
    return contract_to_domain(db_contract)


def sign_as_employee(
    db: Session,
    identity: Identity,
    contract_id: uuid.UUID,
    signature: str,
    expected_version: Optional[int] = None,
) -> Contract:
    """The contract's own employee signs"""

    def authorize(contract: Contract) -> None:
        if identity.user_id != str(contract.employee_id):
            raise AuthorizationError("Only the contracted employee can sign as employee")

    return _transition(
        db,
        identity,
        contract_id,
        expected_version,
        authorize,
        lambda contract: lifecycle.sign_as_employee(contract, signature),
    )


def sign_as_employer(
    db: Session,
    identity: Identity,
    contract_id: uuid.UUID,
    signature: str,
    employer_name: str,
    expected_version: Optional[int] = None,
) -> Contract:
    """An owner or admin signs on behalf of the business"""
    return _transition(
        db,
        identity,
        contract_id,
        expected_version,
        lambda contract: _require_admin(identity, "sign as employer"),
        lambda contract: lifecycle.sign_as_employer(contract, signature, employer_name),
    )


def terminate(
    db: Session,
    identity: Identity,
    contract_id: uuid.UUID,
    reason: str,
    expected_version: Optional[int] = None,
) -> Contract:
    """Terminate a contract. Requires owner/admin; irreversible."""
    return _transition(
        db,
        identity,
        contract_id,
        expected_version,
        lambda contract: _require_admin(identity, "terminate contracts"),
        lambda contract: lifecycle.terminate(contract, reason),
    )


def expire(
    db: Session,
    identity: Identity,
    contract_id: uuid.UUID,
    today: Optional[date] = None,
) -> Contract:
    return _transition(
        db,
        identity,
        contract_id,
        None,
        lambda contract: _require_admin(identity, "expire contracts"),
        lambda contract: lifecycle.expire(contract, today or date.today()),
    )
