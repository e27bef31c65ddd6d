"""Unit tests for catalog lookups"""

import uuid
from decimal import Decimal
from shopdesk.domain.catalog import filter_active_services, get_service_price
from shopdesk.domain.models import Service

BUSINESS = uuid.uuid4()
OTHER = uuid.uuid4()


def make_service(name: str, price: str, business_id=BUSINESS, active: bool = True) -> Service:
    return Service(id=uuid.uuid4(), business_id=business_id, name=name, base_price=Decimal(price), active=active)


def test_get_service_price_found():
    haircut = make_service("Haircut", "1000")
    braids = make_service("Braids", "2500")

    assert get_service_price([haircut, braids], braids.id) == Decimal("2500")


def test_get_service_price_missing_returns_none():
    """Test an unknown id yields no price rather than an error"""
    haircut = make_service("Haircut", "1000")

    assert get_service_price([haircut], uuid.uuid4()) is None
    assert get_service_price([], haircut.id) is None


def test_filter_active_services():
    """Test inactive and other-business services are excluded, order kept"""
    a = make_service("A", "10")
    b = make_service("B", "20", active=False)
    c = make_service("C", "30", business_id=OTHER)
    d = make_service("D", "40")

    assert filter_active_services([a, b, c, d], BUSINESS) == [a, d]
