"""Commission calculator - splits a sale between employee and house"""

from decimal import Decimal
from shopdesk.domain.models import CommissionPolicy, CommissionSplit, CommissionType


def calculate_commission(sale_amount: Decimal, policy: CommissionPolicy) -> CommissionSplit:
    """
    Split a sale amount into employee commission and house amount.

    Rules:
    - percentage: commission = sale_amount * percentage / 100
    - fixed: commission = fixed, regardless of sale_amount
    - house_amount = sale_amount - commission, always

    A fixed commission larger than the sale yields a negative house amount.
    That is returned as-is; callers decide whether to flag it.

    Example:
        1000 at 15% -> commission 150, house 850
    """
    sale_amount = Decimal(sale_amount)

    if policy.type == CommissionType.PERCENTAGE:
        commission = sale_amount * Decimal(policy.percentage) / Decimal(100)
    else:
        commission = Decimal(policy.fixed)

    return CommissionSplit(commission=commission, house_amount=sale_amount - commission)
