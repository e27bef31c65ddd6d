"""Unit tests for the contract state machine"""

import pytest
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from shopdesk.domain.contracts import (
    expire,
    sign_as_employee,
    sign_as_employer,
    terminate,
    validate_new_contract,
)
from shopdesk.domain.exceptions import ConflictError, ValidationError
from shopdesk.domain.models import Contract, ContractStatus

SIGNATURE = "data:image/png;base64,iVBORw0KGgo="
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def draft(**overrides) -> Contract:
    fields = dict(
        id=uuid.uuid4(),
        employee_id=uuid.uuid4(),
        business_id=uuid.uuid4(),
        title="Senior Stylist",
        type="full_time",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        terms="Tuesday to Saturday, 9am to 6pm.",
        salary_amount=Decimal("150000"),
        salary_frequency="monthly",
    )
    fields.update(overrides)
    return Contract(**fields)


def test_employee_first_then_employer():
    """Test draft -> pending -> signed with the employee signing first"""
    pending = sign_as_employee(draft(), SIGNATURE, now=NOW)

    assert pending.status == ContractStatus.PENDING
    assert pending.employee_signed_at == NOW
    assert pending.employee_signature == SIGNATURE

    signed = sign_as_employer(pending, SIGNATURE, "Ada Owner", now=NOW)

    assert signed.status == ContractStatus.SIGNED
    assert signed.employer_name == "Ada Owner"
    assert signed.employer_signed_at == NOW


def test_employer_first_then_employee():
    """Test signing order does not matter"""
    pending = sign_as_employer(draft(), SIGNATURE, "Ada Owner", now=NOW)
    assert pending.status == ContractStatus.PENDING

    signed = sign_as_employee(pending, SIGNATURE, now=NOW)
    assert signed.status == ContractStatus.SIGNED


def test_transitions_do_not_mutate_input():
    original = draft()
    sign_as_employee(original, SIGNATURE)

    assert original.status == ContractStatus.DRAFT
    assert original.employee_signed_at is None


def test_double_employee_signature_rejected():
    pending = sign_as_employee(draft(), SIGNATURE)

    with pytest.raises(ConflictError, match="already signed"):
        sign_as_employee(pending, SIGNATURE)


def test_double_employer_signature_rejected():
    pending = sign_as_employer(draft(), SIGNATURE, "Owner")

    with pytest.raises(ConflictError, match="already signed"):
        sign_as_employer(pending, SIGNATURE, "Owner")


@pytest.mark.parametrize("signature", ["", "   "])
def test_empty_signature_rejected(signature):
    with pytest.raises(ValidationError, match="signature"):
        sign_as_employee(draft(), signature)


def test_employer_name_defaults():
    pending = sign_as_employer(draft(), SIGNATURE, "")
    assert pending.employer_name == "Employer"


@pytest.mark.parametrize("status", [ContractStatus.TERMINATED, ContractStatus.EXPIRED])
def test_terminal_states_reject_everything(status):
    """Test no signature, termination or expiry is accepted from a terminal state"""
    contract = draft(status=status)

    with pytest.raises(ConflictError):
        sign_as_employee(contract, SIGNATURE)
    with pytest.raises(ConflictError):
        sign_as_employer(contract, SIGNATURE, "Owner")
    with pytest.raises(ConflictError):
        terminate(contract, "Restructuring")
    with pytest.raises(ConflictError):
        expire(contract, date(2030, 1, 1))


@pytest.mark.parametrize(
    "contract",
    [
        draft(),
        sign_as_employee(draft(), SIGNATURE),
        sign_as_employer(sign_as_employee(draft(), SIGNATURE), SIGNATURE, "Owner"),
    ],
)
def test_terminate_from_any_open_state(contract):
    terminated = terminate(contract, "  Restructuring  ", now=NOW)

    assert terminated.status == ContractStatus.TERMINATED
    assert terminated.termination_reason == "Restructuring"
    assert terminated.terminated_at == NOW


@pytest.mark.parametrize("reason", ["", "  "])
def test_terminate_requires_reason(reason):
    contract = draft()

    with pytest.raises(ValidationError, match="termination reason"):
        terminate(contract, reason)

    assert contract.status == ContractStatus.DRAFT


def test_expire_after_end_date():
    signed = sign_as_employer(sign_as_employee(draft(), SIGNATURE), SIGNATURE, "Owner")
    expired = expire(signed, date(2025, 1, 1))

    assert expired.status == ContractStatus.EXPIRED


def test_expire_before_end_date_rejected():
    with pytest.raises(ConflictError, match="end date"):
        expire(draft(), date(2024, 12, 31))


def test_open_ended_contract_never_expires():
    with pytest.raises(ConflictError):
        expire(draft(end_date=None), date(2099, 1, 1))


@pytest.mark.parametrize(
    "kwargs,message",
    [
        (dict(title=""), "title"),
        (dict(terms=" "), "terms"),
        (dict(start_date=None), "start date"),
        (dict(end_date=date(2023, 12, 31)), "end date"),
        (dict(salary_amount=Decimal("-1")), "Salary"),
    ],
)
def test_validate_new_contract_rejections(kwargs, message):
    args = dict(
        title="Stylist",
        terms="Terms",
        start_date=date(2024, 1, 1),
        end_date=None,
        salary_amount=None,
    )
    args.update(kwargs)

    with pytest.raises(ValidationError, match=message):
        validate_new_contract(**args)
