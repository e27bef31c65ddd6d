"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional

CENTS = Decimal("0.01")


class CommissionType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PaymentStatus(str, Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"


class ContractStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    SIGNED = "signed"
    EXPIRED = "expired"
    TERMINATED = "terminated"

    @property
    def is_terminal(self) -> bool:
        return self in (ContractStatus.EXPIRED, ContractStatus.TERMINATED)


class Role(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    EMPLOYEE = "employee"


class IntentStatus(str, Enum):
    PENDING = "pending"
    VERIFYING = "verifying"
    SUCCESSFUL = "successful"
    FAILED = "failed"


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, resolved outside the core"""

    user_id: str
    business_id: uuid.UUID
    role: Role = Role.EMPLOYEE

    @property
    def can_administer(self) -> bool:
        return self.role in (Role.OWNER, Role.ADMIN)


@dataclass(frozen=True)
class CommissionPolicy:
    """Employee-level commission configuration"""

    type: CommissionType
    percentage: Decimal = Decimal("0")
    fixed: Decimal = Decimal("0")


@dataclass(frozen=True)
class CommissionSplit:
    """Commission payout and the amount the house keeps"""

    commission: Decimal
    house_amount: Decimal

    @property
    def total(self) -> Decimal:
        return self.commission + self.house_amount

    @property
    def exceeds_sale(self) -> bool:
        return self.house_amount < 0

    def rounded(self) -> "CommissionSplit":
        """Round commission to cents; house absorbs the difference so the total is exact"""
        commission = self.commission.quantize(CENTS, rounding=ROUND_HALF_UP)
        return CommissionSplit(commission=commission, house_amount=self.total - commission)


@dataclass
class Service:
    """Offered item in a business catalog"""

    id: uuid.UUID
    business_id: uuid.UUID
    name: str
    base_price: Decimal
    active: bool = True
    tax_rate: Decimal = Decimal("0")


@dataclass
class Employee:
    """Employee with commission configuration"""

    id: uuid.UUID
    business_id: uuid.UUID
    name: str
    commission_type: CommissionType
    commission_percentage: Decimal = Decimal("0")
    fixed_commission: Decimal = Decimal("0")

    @property
    def policy(self) -> CommissionPolicy:
        return CommissionPolicy(
            type=self.commission_type,
            percentage=self.commission_percentage,
            fixed=self.fixed_commission,
        )


@dataclass
class SaleBalance:
    """Ledger view of a sale: what is owed and what has been paid"""

    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    payment_status: PaymentStatus


@dataclass
class PaymentOutcome:
    """Result of applying one payment to a sale balance"""

    before: SaleBalance
    amount: Decimal
    after: SaleBalance


@dataclass
class CartLine:
    """Single line in a checkout cart"""

    service: Service
    quantity: int
    unit_price: Decimal
    discount: Decimal = Decimal("0")

    @property
    def gross(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def tax_amount(self) -> Decimal:
        return self.gross * self.service.tax_rate / Decimal(100)

    @property
    def total(self) -> Decimal:
        return self.gross - self.discount


@dataclass
class CheckoutTotals:
    """Money summary of a checkout cart"""

    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    payment_status: PaymentStatus


@dataclass
class DebtorSale:
    """Outstanding sale as shown in the debtors list"""

    sale_id: uuid.UUID
    sale_number: str
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    payment_status: PaymentStatus
    created_at: datetime
    customer_id: Optional[uuid.UUID] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None


@dataclass
class OutstandingSummary:
    total_outstanding: Decimal
    debtor_count: int
    walk_in_count: int


@dataclass
class Contract:
    """Employment contract and its signature state"""

    id: uuid.UUID
    employee_id: uuid.UUID
    business_id: uuid.UUID
    title: str
    type: str
    start_date: date
    terms: str
    status: ContractStatus = ContractStatus.DRAFT
    end_date: Optional[date] = None
    salary_amount: Optional[Decimal] = None
    salary_frequency: Optional[str] = None
    employee_signature: Optional[str] = None
    employee_signed_at: Optional[datetime] = None
    employer_signature: Optional[str] = None
    employer_signed_at: Optional[datetime] = None
    employer_name: Optional[str] = None
    termination_reason: Optional[str] = None
    terminated_at: Optional[datetime] = None
    version: int = 1


@dataclass
class ActivityEntry:
    """Employee activity log line"""

    employee_id: uuid.UUID
    action: str
    details: Optional[str] = None


@dataclass
class ReceiptItem:
    name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    total: Decimal


@dataclass
class SaleReceipt:
    """Receipt payload for the PDF renderer, produced at checkout"""

    receipt_number: str
    issued_at: datetime
    sale_number: str
    customer_name: str
    items: List[ReceiptItem] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    amount_paid: Decimal = Decimal("0")
    balance_due: Decimal = Decimal("0")
    payment_method: str = "cash"


@dataclass
class PaymentReceipt:
    """Snapshot of a debt payment for external reporting"""

    receipt_number: str
    issued_at: datetime
    sale_id: uuid.UUID
    sale_number: str
    customer_name: str
    original_total: Decimal
    previously_paid: Decimal
    this_payment: Decimal
    total_paid: Decimal
    remaining_balance: Decimal
    payment_method: str
    customer_phone: Optional[str] = None
