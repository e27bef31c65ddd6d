"""Contract lifecycle state machine

States: draft -> pending -> signed, with expired and terminated as terminal.
Every transition returns a new Contract; the input is never mutated, so a
rejected transition leaves nothing half-applied.
"""

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from shopdesk.domain.exceptions import ConflictError, ValidationError
from shopdesk.domain.models import Contract, ContractStatus


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _require_open(contract: Contract, action: str) -> None:
    if contract.status.is_terminal:
        raise ConflictError(f"Cannot {action}: contract is {contract.status.value}")


def _require_signature(signature: str) -> None:
    if not signature or not signature.strip():
        raise ValidationError("Please provide a signature")


def validate_new_contract(
    title: str,
    terms: str,
    start_date: Optional[date],
    end_date: Optional[date] = None,
    salary_amount: Optional[Decimal] = None,
) -> None:
    if not title or not title.strip():
        raise ValidationError("Contract title is required")
    if not terms or not terms.strip():
        raise ValidationError("Contract terms are required")
    if start_date is None:
        raise ValidationError("Contract start date is required")
    if end_date is not None and end_date < start_date:
        raise ValidationError("Contract end date cannot precede its start date")
    if salary_amount is not None and salary_amount < 0:
        raise ValidationError("Salary amount cannot be negative")


def sign_as_employee(contract: Contract, signature: str, now: Optional[datetime] = None) -> Contract:
    """Record the employee signature; signed once the employer has also signed"""
    _require_open(contract, "sign")
    if contract.employee_signed_at is not None:
        raise ConflictError("Employee has already signed this contract")
    _require_signature(signature)

    status = ContractStatus.SIGNED if contract.employer_signed_at is not None else ContractStatus.PENDING
    return replace(
        contract,
        employee_signature=signature,
        employee_signed_at=now or _now(),
        status=status,
    )


def sign_as_employer(
    contract: Contract,
    signature: str,
    employer_name: str,
    now: Optional[datetime] = None,
) -> Contract:
    """Record the employer signature; signed once the employee has also signed"""
    _require_open(contract, "sign")
    if contract.employer_signed_at is not None:
        raise ConflictError("Employer has already signed this contract")
    _require_signature(signature)

    status = ContractStatus.SIGNED if contract.employee_signed_at is not None else ContractStatus.PENDING
    return replace(
        contract,
        employer_signature=signature,
        employer_signed_at=now or _now(),
        employer_name=employer_name or "Employer",
        status=status,
    )


def terminate(contract: Contract, reason: str, now: Optional[datetime] = None) -> Contract:
    """Terminate a non-terminal contract. Irreversible."""
    if not reason or not reason.strip():
        raise ValidationError("Please provide a termination reason")
    _require_open(contract, "terminate")

    return replace(
        contract,
        status=ContractStatus.TERMINATED,
        termination_reason=reason.strip(),
        terminated_at=now or _now(),
    )


def expire(contract: Contract, today: date) -> Contract:
    """Mark a contract expired once its end date has passed"""
    _require_open(contract, "expire")
    if contract.end_date is None or contract.end_date >= today:
        raise ConflictError("Contract has not reached its end date")

    return replace(contract, status=ContractStatus.EXPIRED)
