"""SQLAlchemy ORM models for the back-office store"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    Text,
    Uuid,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(12, 2, asdecimal=True)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ServiceModel(Base):
    """Catalog entry a business sells"""

    __tablename__ = "services"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid, nullable=False, index=True)
    name = Column(Text, nullable=False)
    base_price = Column(Money, nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())


class EmployeeModel(Base):
    """Employee and commission configuration"""

    __tablename__ = "employees"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid, nullable=False, index=True)
    name = Column(Text, nullable=False)
    commission_type = Column(Text, nullable=False, default="percentage")
    commission_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    fixed_commission = Column(Money, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())


class CustomerModel(Base):
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid, nullable=False, index=True)
    name = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)


class TransactionModel(Base):
    """Commission view of a recorded sale"""

    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid, nullable=False, index=True)
    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    service_id = Column(Uuid, ForeignKey("services.id"), nullable=False)
    total_amount = Column(Money, nullable=False)
    commission_amount = Column(Money, nullable=False)
    house_amount = Column(Money, nullable=False)
    is_commission_paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())


class ActivityLogModel(Base):
    """Append-only employee activity trail"""

    __tablename__ = "employee_activity_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id = Column(Uuid, nullable=False, index=True)
    action = Column(Text, nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())


class SaleModel(Base):
    """Ledger view of a sale; version guards concurrent payment writes"""

    __tablename__ = "sales"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid, nullable=False, index=True)
    sale_number = Column(Text, nullable=False, unique=True)
    customer_id = Column(Uuid, ForeignKey("customers.id"), nullable=True)
    employee_id = Column(Uuid, nullable=True)
    subtotal = Column(Money, nullable=False, default=0)
    tax_amount = Column(Money, nullable=False, default=0)
    discount_amount = Column(Money, nullable=False, default=0)
    total_amount = Column(Money, nullable=False)
    amount_paid = Column(Money, nullable=False, default=0)
    balance_due = Column(Money, nullable=False, default=0)
    payment_status = Column(Text, nullable=False)
    payment_method = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    customer = relationship("CustomerModel")
    items = relationship("SaleItemModel", back_populates="sale", cascade="all, delete-orphan")
    payments = relationship("PaymentModel", back_populates="sale", order_by="PaymentModel.created_at")

    __mapper_args__ = {"version_id_col": version}


class SaleItemModel(Base):
    __tablename__ = "sale_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sale_id = Column(Uuid, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(Uuid, ForeignKey("services.id"), nullable=False)
    name = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Money, nullable=False)
    discount = Column(Money, nullable=False, default=0)
    tax_amount = Column(Money, nullable=False, default=0)
    total = Column(Money, nullable=False)

    sale = relationship("SaleModel", back_populates="items")


class PaymentModel(Base):
    """Append-only payment event against a sale"""

    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sale_id = Column(Uuid, ForeignKey("sales.id"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    payment_method = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="successful")
    reference = Column(Text, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    sale = relationship("SaleModel", back_populates="payments")


class ContractModel(Base):
    """Employment contract; version guards concurrent transitions"""

    __tablename__ = "employee_contracts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, index=True)
    business_id = Column(Uuid, nullable=False, index=True)
    title = Column(Text, nullable=False)
    contract_type = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    terms = Column(Text, nullable=False)
    salary_amount = Column(Money, nullable=True)
    salary_frequency = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="draft")
    employee_signature = Column(Text, nullable=True)
    employee_signed_at = Column(DateTime(timezone=True), nullable=True)
    employer_signature = Column(Text, nullable=True)
    employer_signed_at = Column(DateTime(timezone=True), nullable=True)
    employer_name = Column(Text, nullable=True)
    termination_reason = Column(Text, nullable=True)
    terminated_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __mapper_args__ = {"version_id_col": version}


class PaymentIntentModel(Base):
    """Hosted-checkout payment awaiting gateway verification"""

    __tablename__ = "payment_transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid, nullable=False, index=True)
    sale_id = Column(Uuid, ForeignKey("sales.id"), nullable=False)
    reference = Column(Text, nullable=False, unique=True)
    amount = Column(Money, nullable=False)
    gateway = Column(Text, nullable=False)
    customer_email = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="pending")
    payment_metadata = Column("metadata", JSON, nullable=True)
    gateway_response = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
