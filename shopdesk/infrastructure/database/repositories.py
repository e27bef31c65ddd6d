"""Data access layer for back-office entities"""

import uuid
from decimal import Decimal
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload
from shopdesk.infrastructure.database.models import (
    ActivityLogModel,
    ContractModel,
    CustomerModel,
    EmployeeModel,
    PaymentIntentModel,
    PaymentModel,
    SaleItemModel,
    SaleModel,
    ServiceModel,
    TransactionModel,
)
from shopdesk.domain.models import (
    ActivityEntry,
    CartLine,
    CheckoutTotals,
    CommissionSplit,
    CommissionType,
    Contract,
    ContractStatus,
    DebtorSale,
    Employee,
    PaymentStatus,
    SaleBalance,
    Service,
)


def service_to_domain(row: ServiceModel) -> Service:
    return Service(
        id=row.id,
        business_id=row.business_id,
        name=row.name,
        base_price=Decimal(row.base_price),
        active=row.is_active,
        tax_rate=Decimal(row.tax_rate or 0),
    )


def employee_to_domain(row: EmployeeModel) -> Employee:
    return Employee(
        id=row.id,
        business_id=row.business_id,
        name=row.name,
        commission_type=CommissionType(row.commission_type),
        commission_percentage=Decimal(row.commission_percentage or 0),
        fixed_commission=Decimal(row.fixed_commission or 0),
    )


def sale_balance(row: SaleModel) -> SaleBalance:
    return SaleBalance(
        total_amount=Decimal(row.total_amount),
        amount_paid=Decimal(row.amount_paid or 0),
        balance_due=Decimal(row.balance_due),
        payment_status=PaymentStatus(row.payment_status),
    )


def debtor_view(row: SaleModel) -> DebtorSale:
    customer = row.customer
    return DebtorSale(
        sale_id=row.id,
        sale_number=row.sale_number,
        total_amount=Decimal(row.total_amount),
        amount_paid=Decimal(row.amount_paid or 0),
        balance_due=Decimal(row.balance_due),
        payment_status=PaymentStatus(row.payment_status),
        created_at=row.created_at,
        customer_id=row.customer_id,
        customer_name=customer.name if customer else None,
        customer_phone=customer.phone if customer else None,
    )


def contract_to_domain(row: ContractModel) -> Contract:
    return Contract(
        id=row.id,
        employee_id=row.employee_id,
        business_id=row.business_id,
        title=row.title,
        type=row.contract_type,
        start_date=row.start_date,
        end_date=row.end_date,
        terms=row.terms,
        salary_amount=Decimal(row.salary_amount) if row.salary_amount is not None else None,
        salary_frequency=row.salary_frequency,
        status=ContractStatus(row.status),
        employee_signature=row.employee_signature,
        employee_signed_at=row.employee_signed_at,
        employer_signature=row.employer_signature,
        employer_signed_at=row.employer_signed_at,
        employer_name=row.employer_name,
        termination_reason=row.termination_reason,
        terminated_at=row.terminated_at,
        version=row.version,
    )


class ServiceRepository:
    """Repository for catalog services"""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self, business_id: uuid.UUID) -> List[ServiceModel]:
        """Active services of a business, ordered by name"""
        return (
            self.db.query(ServiceModel)
            .filter(ServiceModel.business_id == business_id, ServiceModel.is_active.is_(True))
            .order_by(ServiceModel.name.asc())
            .all()
        )

    def get(self, service_id: uuid.UUID) -> Optional[ServiceModel]:
        return self.db.get(ServiceModel, service_id)

    def get_many(self, service_ids: Iterable[uuid.UUID]) -> List[ServiceModel]:
        ids = list(set(service_ids))
        if not ids:
            return []
        return self.db.query(ServiceModel).filter(ServiceModel.id.in_(ids)).all()


class EmployeeRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, employee_id: uuid.UUID) -> Optional[EmployeeModel]:
        return self.db.get(EmployeeModel, employee_id)


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, customer_id: uuid.UUID) -> Optional[CustomerModel]:
        return self.db.get(CustomerModel, customer_id)


class TransactionRepository:
    """Repository for commission transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create_transaction(
        self,
        employee: Employee,
        service_id: uuid.UUID,
        total_amount: Decimal,
        split: CommissionSplit,
    ) -> TransactionModel:
        """Persist a sale's commission split; business comes from the employee"""
        db_txn = TransactionModel(
            business_id=employee.business_id,
            employee_id=employee.id,
            service_id=service_id,
            total_amount=total_amount,
            commission_amount=split.commission,
            house_amount=split.house_amount,
            is_commission_paid=False,
        )
        self.db.add(db_txn)
        self.db.flush()  # Get ID without committing
        return db_txn

    def get_by_employee(self, employee_id: uuid.UUID, limit: int = 20) -> List[TransactionModel]:
        """Fetch recent transactions for an employee"""
        return (
            self.db.query(TransactionModel)
            .filter(TransactionModel.employee_id == employee_id)
            .order_by(TransactionModel.created_at.desc())
            .limit(limit)
            .all()
        )


class ActivityLogRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_entry(self, entry: ActivityEntry) -> ActivityLogModel:
        db_entry = ActivityLogModel(
            employee_id=entry.employee_id,
            action=entry.action,
            details=entry.details,
        )
        self.db.add(db_entry)
        self.db.flush()
        return db_entry

    def get_by_employee(self, employee_id: uuid.UUID, action: Optional[str] = None) -> List[ActivityLogModel]:
        query = self.db.query(ActivityLogModel).filter(ActivityLogModel.employee_id == employee_id)
        if action is not None:
            query = query.filter(ActivityLogModel.action == action)
        return query.order_by(ActivityLogModel.created_at.desc()).all()


class SaleRepository:
    """Repository for ledger sales"""

    def __init__(self, db: Session):
        self.db = db

    def create_sale(
        self,
        business_id: uuid.UUID,
        sale_number: str,
        totals: CheckoutTotals,
        lines: List[CartLine],
        payment_method: str,
        customer_id: Optional[uuid.UUID] = None,
        employee_id: Optional[uuid.UUID] = None,
        notes: Optional[str] = None,
    ) -> SaleModel:
        """Create sale with its line items"""
        db_sale = SaleModel(
            business_id=business_id,
            sale_number=sale_number,
            customer_id=customer_id,
            employee_id=employee_id,
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            discount_amount=totals.discount_amount,
            total_amount=totals.total_amount,
            amount_paid=totals.amount_paid,
            balance_due=totals.balance_due,
            payment_status=totals.payment_status.value,
            payment_method=payment_method,
            notes=notes,
        )
        self.db.add(db_sale)
        self.db.flush()

        for line in lines:
            self.db.add(
                SaleItemModel(
                    sale_id=db_sale.id,
                    service_id=line.service.id,
                    name=line.service.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    discount=line.discount,
                    tax_amount=line.tax_amount,
                    total=line.total,
                )
            )

        return db_sale

    def get_sale(self, sale_id: uuid.UUID) -> Optional[SaleModel]:
        return (
            self.db.query(SaleModel)
            .options(joinedload(SaleModel.customer), selectinload(SaleModel.items))
            .filter(SaleModel.id == sale_id)
            .first()
        )

    def get_sale_for_update(self, sale_id: uuid.UUID) -> Optional[SaleModel]:
        """Re-read the latest persisted row, locking it where the backend supports it"""
        return (
            self.db.query(SaleModel)
            .filter(SaleModel.id == sale_id)
            .populate_existing()
            .with_for_update()
            .first()
        )

    def list_outstanding(self, business_id: uuid.UUID) -> List[SaleModel]:
        """Sales of a business with a balance still due, newest first"""
        return (
            self.db.query(SaleModel)
            .options(joinedload(SaleModel.customer))
            .filter(SaleModel.business_id == business_id, SaleModel.balance_due > 0)
            .order_by(SaleModel.created_at.desc())
            .all()
        )

    def apply_balance(self, db_sale: SaleModel, balance: SaleBalance) -> SaleModel:
        """Write a new balance; the UPDATE is conditioned on the version read"""
        db_sale.amount_paid = balance.amount_paid
        db_sale.balance_due = balance.balance_due
        db_sale.payment_status = balance.payment_status.value
        self.db.flush()
        return db_sale


class PaymentRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        sale_id: uuid.UUID,
        amount: Decimal,
        payment_method: str,
        reference: Optional[str] = None,
    ) -> PaymentModel:
        db_payment = PaymentModel(
            sale_id=sale_id,
            amount=amount,
            payment_method=payment_method,
            status="successful",
            reference=reference,
        )
        self.db.add(db_payment)
        self.db.flush()
        return db_payment

    def get_by_sale(self, sale_id: uuid.UUID) -> List[PaymentModel]:
        return (
            self.db.query(PaymentModel)
            .filter(PaymentModel.sale_id == sale_id)
            .order_by(PaymentModel.created_at.asc())
            .all()
        )


class ContractRepository:
    """Repository for employee contracts"""

    def __init__(self, db: Session):
        self.db = db

    def create_contract(self, contract: Contract) -> ContractModel:
        db_contract = ContractModel(
            id=contract.id,
            employee_id=contract.employee_id,
            business_id=contract.business_id,
            title=contract.title,
            contract_type=contract.type,
            start_date=contract.start_date,
            end_date=contract.end_date,
            terms=contract.terms,
            salary_amount=contract.salary_amount,
            salary_frequency=contract.salary_frequency,
            status=contract.status.value,
        )
        self.db.add(db_contract)
        self.db.flush()
        return db_contract

    def get_contract(self, contract_id: uuid.UUID, for_update: bool = False) -> Optional[ContractModel]:
        query = self.db.query(ContractModel).filter(ContractModel.id == contract_id)
        if for_update:
            query = query.populate_existing().with_for_update()
        return query.first()

    def save_transition(self, db_contract: ContractModel, contract: Contract) -> ContractModel:
        """Copy transition fields onto the row; the UPDATE is conditioned on the version read"""
        db_contract.status = contract.status.value
        db_contract.employee_signature = contract.employee_signature
        db_contract.employee_signed_at = contract.employee_signed_at
        db_contract.employer_signature = contract.employer_signature
        db_contract.employer_signed_at = contract.employer_signed_at
        db_contract.employer_name = contract.employer_name
        db_contract.termination_reason = contract.termination_reason
        db_contract.terminated_at = contract.terminated_at
        self.db.flush()
        return db_contract


class PaymentIntentRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_intent(
        self,
        business_id: uuid.UUID,
        sale_id: uuid.UUID,
        reference: str,
        amount: Decimal,
        gateway: str,
        email: str,
        metadata: dict,
    ) -> PaymentIntentModel:
        db_intent = PaymentIntentModel(
            business_id=business_id,
            sale_id=sale_id,
            reference=reference,
            amount=amount,
            gateway=gateway,
            customer_email=email,
            status="pending",
            payment_metadata=metadata,
        )
        self.db.add(db_intent)
        self.db.flush()
        return db_intent

    def get_by_reference(self, reference: str) -> Optional[PaymentIntentModel]:
        return (
            self.db.query(PaymentIntentModel)
            .filter(PaymentIntentModel.reference == reference)
            .populate_existing()
            .first()
        )

    def claim_for_verification(self, reference: str) -> bool:
        """Move a pending or failed intent to verifying; False if another caller holds it"""
        claimed = (
            self.db.query(PaymentIntentModel)
            .filter(
                PaymentIntentModel.reference == reference,
                PaymentIntentModel.status.in_(["pending", "failed"]),
            )
            .update({PaymentIntentModel.status: "verifying"}, synchronize_session=False)
        )
        return claimed == 1
