"""Debt ledger arithmetic - balances, payment application and debtor queries"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional
from shopdesk.domain.exceptions import ValidationError
from shopdesk.domain.models import (
    CENTS,
    CartLine,
    CheckoutTotals,
    DebtorSale,
    OutstandingSummary,
    PaymentOutcome,
    PaymentStatus,
    SaleBalance,
)

ZERO = Decimal("0")


def status_for_balance(balance_due: Decimal) -> PaymentStatus:
    return PaymentStatus.COMPLETED if balance_due <= 0 else PaymentStatus.PARTIAL


def has_sub_cent_precision(amount: Decimal) -> bool:
    return amount != amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_payment_amount(balance: SaleBalance, amount: Decimal) -> None:
    """Reject non-positive payments, overpayments and fractions of a cent"""
    if amount <= 0:
        raise ValidationError("Enter a valid payment amount")
    if amount > balance.balance_due:
        raise ValidationError(f"Amount exceeds balance of {balance.balance_due}")
    if has_sub_cent_precision(amount):
        raise ValidationError("Payment amount cannot have more than 2 decimal places")


def compute_payment(balance: SaleBalance, amount: Decimal) -> PaymentOutcome:
    """
    Apply one payment to a sale balance.

    Requirements:
    - 0 < amount <= balance_due in whole cents, otherwise ValidationError and nothing changes
    - amount_paid grows by amount
    - balance_due = max(0, total - amount_paid)
    - status is completed once nothing is owed, partial otherwise

    Example:
        total 1000, paid 0, pay 400 -> paid 400, balance 600, partial
        then pay 600 -> paid 1000, balance 0, completed
    """
    amount = Decimal(amount)
    validate_payment_amount(balance, amount)

    new_paid = balance.amount_paid + amount
    new_balance = max(ZERO, balance.total_amount - new_paid)

    after = SaleBalance(
        total_amount=balance.total_amount,
        amount_paid=new_paid,
        balance_due=new_balance,
        payment_status=status_for_balance(new_balance),
    )
    return PaymentOutcome(before=balance, amount=amount, after=after)


def compute_checkout_totals(lines: List[CartLine], amount_paid: Optional[Decimal] = None) -> CheckoutTotals:
    """
    Total a checkout cart and derive the opening ledger state.

    total = subtotal + tax - discount; amount_paid defaults to the total.
    """
    if not lines:
        raise ValidationError("Cart is empty")

    for line in lines:
        if line.quantity <= 0:
            raise ValidationError(f"Quantity for {line.service.name} must be positive")
        if line.discount < 0:
            raise ValidationError(f"Discount for {line.service.name} cannot be negative")
        if line.unit_price < 0:
            raise ValidationError(f"Price for {line.service.name} cannot be negative")

    subtotal = sum((line.gross for line in lines), ZERO)
    tax_amount = sum((line.tax_amount for line in lines), ZERO).quantize(CENTS, rounding=ROUND_HALF_UP)
    discount_amount = sum((line.discount for line in lines), ZERO)
    total = subtotal + tax_amount - discount_amount

    if total < 0:
        raise ValidationError("Discounts exceed the sale total")

    paid = total if amount_paid is None else Decimal(amount_paid)
    if paid < 0:
        raise ValidationError("Amount paid cannot be negative")
    if paid > total:
        raise ValidationError(f"Amount paid exceeds total of {total}")
    if has_sub_cent_precision(paid):
        raise ValidationError("Amount paid cannot have more than 2 decimal places")

    balance = total - paid
    return CheckoutTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total_amount=total,
        amount_paid=paid,
        balance_due=balance,
        payment_status=status_for_balance(balance),
    )


def matches_debtor_query(sale: DebtorSale, query: str = "", status: str = "all") -> bool:
    """Client-side search over the debtors list: customer name, phone or sale number"""
    if status != "all" and sale.payment_status.value != status:
        return False

    if not query:
        return True

    needle = query.lower()
    if sale.customer_name and needle in sale.customer_name.lower():
        return True
    if sale.customer_phone and query in sale.customer_phone:
        return True
    return needle in sale.sale_number.lower()


def filter_debtors(sales: Iterable[DebtorSale], query: str = "", status: str = "all") -> List[DebtorSale]:
    return [s for s in sales if matches_debtor_query(s, query, status)]


def summarize_outstanding(sales: Iterable[DebtorSale]) -> OutstandingSummary:
    sales = list(sales)
    return OutstandingSummary(
        total_outstanding=sum((s.balance_due for s in sales), ZERO),
        debtor_count=len({s.customer_id for s in sales if s.customer_id is not None}),
        walk_in_count=sum(1 for s in sales if s.customer_id is None),
    )
