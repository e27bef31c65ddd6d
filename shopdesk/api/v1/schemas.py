"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from shopdesk.domain.models import PaymentStatus


class ServiceSchema(BaseModel):
    """Catalog entry available for sale"""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    base_price: Decimal
    tax_rate: Decimal = Decimal("0")


class ServiceListResponse(BaseModel):
    business_id: UUID
    services: List[ServiceSchema]


class ServicePriceResponse(BaseModel):
    service_id: UUID
    price: Optional[Decimal] = None


class RecordSaleRequest(BaseModel):
    """Request body for POST /v1/sales/record"""

    service_id: Optional[UUID] = Field(None, description="Selected catalog service")
    sale_amount: Decimal = Field(..., description="Sale amount, usually the service price")
    employee_id: Optional[UUID] = Field(None, description="Defaults to the calling employee")


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    business_id: UUID
    employee_id: UUID
    service_id: UUID
    total_amount: Decimal
    commission_amount: Decimal
    house_amount: Decimal
    is_commission_paid: bool
    created_at: datetime


class TransactionHistoryResponse(BaseModel):
    employee_id: UUID
    transactions: List[TransactionResponse]


class CheckoutLineSchema(BaseModel):
    service_id: UUID
    quantity: int = Field(1, description="Units sold")
    unit_price: Optional[Decimal] = Field(None, description="Defaults to the catalog price")
    discount: Decimal = Decimal("0")


class CheckoutRequest(BaseModel):
    """Request body for POST /v1/checkout"""

    lines: List[CheckoutLineSchema]
    payment_method: str = "cash"
    amount_paid: Optional[Decimal] = Field(None, description="Defaults to the full total")
    customer_id: Optional[UUID] = None
    notes: Optional[str] = None


class ReceiptItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    total: Decimal


class SaleReceiptSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    receipt_number: str
    issued_at: datetime
    sale_number: str
    customer_name: str
    items: List[ReceiptItemSchema]
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    payment_method: str


class CheckoutResponse(BaseModel):
    sale_id: UUID
    sale_number: str
    payment_status: str
    balance_due: Decimal
    receipt: SaleReceiptSchema


class DebtorSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sale_id: UUID
    sale_number: str
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    payment_status: PaymentStatus
    created_at: datetime
    customer_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None


class DebtorsResponse(BaseModel):
    """Response for GET /v1/debtors"""

    total_outstanding: Decimal
    debtor_count: int
    walk_in_count: int
    debtors: List[DebtorSchema]


class PaymentRequest(BaseModel):
    """Request body for POST /v1/sales/{sale_id}/payments"""

    amount: Decimal = Field(..., description="Amount being paid now")
    method: str = "cash"
    expected_version: Optional[int] = Field(None, description="Sale version the caller last saw")


class PaymentReceiptSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    receipt_number: str
    issued_at: datetime
    sale_id: UUID
    sale_number: str
    customer_name: str
    customer_phone: Optional[str] = None
    original_total: Decimal
    previously_paid: Decimal
    this_payment: Decimal
    total_paid: Decimal
    remaining_balance: Decimal
    payment_method: str


class PaymentResponse(BaseModel):
    sale_id: UUID
    amount_paid: Decimal
    balance_due: Decimal
    payment_status: str
    version: int
    receipt: PaymentReceiptSchema


class ContractCreateRequest(BaseModel):
    """Request body for POST /v1/contracts"""

    employee_id: UUID
    title: str
    contract_type: str = "full_time"
    start_date: date
    end_date: Optional[date] = None
    terms: str
    salary_amount: Optional[Decimal] = None
    salary_frequency: Optional[str] = "monthly"


class EmployeeSignRequest(BaseModel):
    signature: str = Field(..., description="Signature image as a data URL")
    expected_version: Optional[int] = None


class EmployerSignRequest(EmployeeSignRequest):
    employer_name: str = "Employer"


class TerminateRequest(BaseModel):
    reason: str
    expected_version: Optional[int] = None


class ContractResponse(BaseModel):
    contract_id: UUID
    employee_id: UUID
    status: str
    version: int
    document: Dict[str, Any]


class PaymentInitializeRequest(BaseModel):
    """Request body for POST /v1/payments/initialize"""

    sale_id: UUID
    amount: Decimal
    email: str = Field(..., min_length=3)
    gateway: Optional[str] = Field(None, description="Defaults to the configured gateway")
    metadata: Optional[Dict[str, Any]] = None


class PaymentInitializeResponse(BaseModel):
    reference: str
    authorization_url: str
    amount: Decimal
    gateway: str


class PaymentVerifyRequest(BaseModel):
    """Gateway callback body"""

    reference: str = Field(..., min_length=1)
    status: str


class PaymentVerifyResponse(BaseModel):
    reference: str
    status: str
    already_applied: bool = False
    payment: Optional[PaymentResponse] = None
