"""Service catalog helpers"""

import uuid
from decimal import Decimal
from typing import Iterable, List, Optional
from shopdesk.domain.models import Service


def get_service_price(services: Iterable[Service], service_id: uuid.UUID) -> Optional[Decimal]:
    """Base price of the service with this id, or None when it is not listed"""
    for service in services:
        if service.id == service_id:
            return service.base_price
    return None


def filter_active_services(services: Iterable[Service], business_id: uuid.UUID) -> List[Service]:
    """Active services belonging to a business, in input order"""
    return [s for s in services if s.business_id == business_id and s.active]
