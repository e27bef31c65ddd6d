"""Pytest fixtures for testing"""

import uuid
import pytest
from decimal import Decimal
from typing import Any, Dict, Generator, List, Optional, Tuple
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from shopdesk.api.main import create_app
from shopdesk.api.dependencies import get_gateway_client, get_receipt_client
from shopdesk.domain.exceptions import PaymentGatewayError
from shopdesk.domain.gateway import GatewayVerification
from shopdesk.domain.models import Identity, Role
from shopdesk.infrastructure.database.models import (
    Base,
    CustomerModel,
    EmployeeModel,
    SaleModel,
    ServiceModel,
)
from shopdesk.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BUSINESS_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
OTHER_BUSINESS_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")


class RecordingReceiptClient:
    """Receipt client stand-in that keeps payloads instead of posting them"""

    def __init__(self):
        self.sent: List[Tuple[str, Dict[str, Any]]] = []

    async def send_receipt(self, kind: str, payload: Dict[str, Any]) -> bool:
        self.sent.append((kind, payload))
        return True


class FakeGatewayClient:
    """Gateway stand-in; verify answers with whatever was initialized"""

    def __init__(self):
        self.initialized: Dict[str, int] = {}
        self.verify_status = "success"
        self.verify_amount: Optional[int] = None
        self.fail_with: Optional[PaymentGatewayError] = None

    async def initialize(self, email: str, amount_minor: int, reference: str, metadata: Dict[str, Any]) -> str:
        if self.fail_with:
            raise self.fail_with
        self.initialized[reference] = amount_minor
        return f"https://checkout.test/{reference}"

    async def verify(self, reference: str) -> GatewayVerification:
        if self.fail_with:
            raise self.fail_with
        amount = self.verify_amount if self.verify_amount is not None else self.initialized.get(reference, 0)
        return GatewayVerification(reference=reference, status=self.verify_status, amount_minor=amount)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def receipt_client() -> RecordingReceiptClient:
    return RecordingReceiptClient()


@pytest.fixture
def gateway_client() -> FakeGatewayClient:
    return FakeGatewayClient()


@pytest.fixture
def client(db: Session, receipt_client: RecordingReceiptClient, gateway_client: FakeGatewayClient) -> TestClient:
    """Create FastAPI test client with test database and stubbed outbound clients"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_receipt_client] = lambda: receipt_client
    app.dependency_overrides[get_gateway_client] = lambda: gateway_client
    return TestClient(app)


@pytest.fixture
def employee(db: Session) -> EmployeeModel:
    """Employee on a 15% commission"""
    row = EmployeeModel(
        business_id=BUSINESS_ID,
        name="Ada Stylist",
        commission_type="percentage",
        commission_percentage=Decimal("15"),
        fixed_commission=Decimal("0"),
    )
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def fixed_employee(db: Session) -> EmployeeModel:
    """Employee on a flat 500 commission per sale"""
    row = EmployeeModel(
        business_id=BUSINESS_ID,
        name="Bola Barber",
        commission_type="fixed",
        commission_percentage=Decimal("40"),
        fixed_commission=Decimal("500"),
    )
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def services(db: Session) -> Dict[str, ServiceModel]:
    rows = {
        "haircut": ServiceModel(business_id=BUSINESS_ID, name="Haircut", base_price=Decimal("1000"), is_active=True),
        "braids": ServiceModel(
            business_id=BUSINESS_ID, name="Braids", base_price=Decimal("2500"), tax_rate=Decimal("7.5"), is_active=True
        ),
        "retired": ServiceModel(business_id=BUSINESS_ID, name="Perm", base_price=Decimal("800"), is_active=False),
        "foreign": ServiceModel(business_id=OTHER_BUSINESS_ID, name="Shave", base_price=Decimal("300"), is_active=True),
    }
    db.add_all(rows.values())
    db.commit()
    return rows


@pytest.fixture
def customer(db: Session) -> CustomerModel:
    row = CustomerModel(business_id=BUSINESS_ID, name="Chidi Okafor", phone="08031234567")
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def make_sale(db: Session):
    """Factory for ledger sales with a given total and amount already paid"""
    counter = {"n": 0}

    def _make(
        total: str = "1000",
        paid: str = "0",
        customer: Optional[CustomerModel] = None,
        business_id: uuid.UUID = BUSINESS_ID,
    ) -> SaleModel:
        counter["n"] += 1
        total_d, paid_d = Decimal(total), Decimal(paid)
        balance = total_d - paid_d
        row = SaleModel(
            business_id=business_id,
            sale_number=f"SL-TEST-{counter['n']:04d}",
            customer_id=customer.id if customer else None,
            subtotal=total_d,
            total_amount=total_d,
            amount_paid=paid_d,
            balance_due=balance,
            payment_status="partial" if balance > 0 else "completed",
            payment_method="cash",
        )
        db.add(row)
        db.commit()
        return row

    return _make


@pytest.fixture
def owner() -> Identity:
    return Identity(user_id="owner-1", business_id=BUSINESS_ID, role=Role.OWNER)


def headers_for(user_id: Any, role: str = "employee", business_id: uuid.UUID = BUSINESS_ID) -> Dict[str, str]:
    return {"X-User-Id": str(user_id), "X-Business-Id": str(business_id), "X-Role": role}


@pytest.fixture
def owner_headers() -> Dict[str, str]:
    return headers_for("owner-1", role="owner")
