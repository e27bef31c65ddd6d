"""Unit tests for the commission calculator"""

import pytest
import random
from decimal import Decimal
from shopdesk.domain.commission import calculate_commission
from shopdesk.domain.models import CommissionPolicy, CommissionSplit, CommissionType


def percentage(pct: str) -> CommissionPolicy:
    return CommissionPolicy(type=CommissionType.PERCENTAGE, percentage=Decimal(pct))


def fixed(amount: str) -> CommissionPolicy:
    return CommissionPolicy(type=CommissionType.FIXED, fixed=Decimal(amount))


def test_percentage_commission():
    """Test 1000 at 15% -> 150 commission, 850 house"""
    split = calculate_commission(Decimal("1000"), percentage("15"))

    assert split.commission == Decimal("150")
    assert split.house_amount == Decimal("850")


def test_fixed_commission_ignores_amount():
    """Test fixed commission is paid regardless of sale size"""
    small = calculate_commission(Decimal("600"), fixed("500"))
    large = calculate_commission(Decimal("20000"), fixed("500"))

    assert small.commission == large.commission == Decimal("500")
    assert small.house_amount == Decimal("100")
    assert large.house_amount == Decimal("19500")


def test_fixed_commission_ignores_percentage_field():
    """Test percentage on a fixed policy has no effect"""
    policy = CommissionPolicy(type=CommissionType.FIXED, percentage=Decimal("40"), fixed=Decimal("250"))
    split = calculate_commission(Decimal("1000"), policy)

    assert split.commission == Decimal("250")


def test_fixed_commission_above_sale_keeps_negative_house():
    """Test a flat fee larger than the sale is returned unclamped and flagged"""
    split = calculate_commission(Decimal("300"), fixed("500"))

    assert split.commission == Decimal("500")
    assert split.house_amount == Decimal("-200")
    assert split.exceeds_sale is True


def test_zero_percentage_keeps_everything_in_house():
    split = calculate_commission(Decimal("1000"), percentage("0"))

    assert split.commission == Decimal("0")
    assert split.house_amount == Decimal("1000")
    assert split.exceeds_sale is False


def test_hundred_percent_leaves_nothing_for_house():
    split = calculate_commission(Decimal("1000"), percentage("100"))

    assert split.commission == Decimal("1000")
    assert split.house_amount == Decimal("0")


def test_calculation_is_exact_for_fractional_results():
    """Test no rounding happens in the calculator itself"""
    split = calculate_commission(Decimal("333.33"), percentage("12.5"))

    assert split.commission == Decimal("41.66625")
    assert split.commission + split.house_amount == Decimal("333.33")


def test_rounded_split_keeps_total():
    """Test rounding to cents moves the remainder into the house amount"""
    split = calculate_commission(Decimal("333.33"), percentage("12.5")).rounded()

    assert split.commission == Decimal("41.67")
    assert split.house_amount == Decimal("291.66")
    assert split.total == Decimal("333.33")


def test_rounded_uses_half_up():
    split = CommissionSplit(commission=Decimal("10.005"), house_amount=Decimal("89.995")).rounded()

    assert split.commission == Decimal("10.01")
    assert split.house_amount == Decimal("89.99")


@pytest.mark.parametrize(
    "amount,pct,expected_commission",
    [
        ("1000", "15", "150"),
        ("2500", "10", "250"),
        ("1", "50", "0.5"),
        ("0.01", "100", "0.01"),
        ("99999.99", "0", "0"),
    ],
)
def test_percentage_table(amount, pct, expected_commission):
    split = calculate_commission(Decimal(amount), percentage(pct))
    assert split.commission == Decimal(expected_commission)


def test_split_always_sums_to_sale_amount():
    """Test commission + house == sale for a spread of seeded inputs"""
    rng = random.Random(20240601)

    for _ in range(500):
        amount = Decimal(rng.randint(1, 10_000_000)) / 100
        if rng.random() < 0.5:
            policy = percentage(str(Decimal(rng.randint(0, 10000)) / 100))
        else:
            policy = fixed(str(Decimal(rng.randint(0, 1_000_000)) / 100))

        split = calculate_commission(amount, policy)
        assert split.commission + split.house_amount == amount
        assert split.rounded().total == amount


def test_percentage_commission_bounded_by_sale():
    """Test 0 <= commission <= sale whenever 0 <= pct <= 100"""
    rng = random.Random(7)

    for _ in range(500):
        amount = Decimal(rng.randint(1, 10_000_000)) / 100
        pct = Decimal(rng.randint(0, 10000)) / 100

        split = calculate_commission(amount, percentage(str(pct)))
        assert Decimal("0") <= split.commission <= amount
        assert split.house_amount >= 0
