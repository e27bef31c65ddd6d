"""GET /v1/services - active catalog for the caller's business"""

import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shopdesk.api.v1.schemas import ServiceListResponse, ServicePriceResponse, ServiceSchema
from shopdesk.api.dependencies import get_identity
from shopdesk.domain.catalog import filter_active_services, get_service_price
from shopdesk.domain.models import Identity
from shopdesk.infrastructure.database.session import get_db
from shopdesk.infrastructure.database.repositories import ServiceRepository, service_to_domain

router = APIRouter()


def _active_services(db: Session, identity: Identity):
    rows = ServiceRepository(db).list_active(identity.business_id)
    return filter_active_services((service_to_domain(row) for row in rows), identity.business_id)


@router.get("/services", response_model=ServiceListResponse)
def list_services(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    """
    List services an employee can record a sale against.

    Returns:
        Active services of the caller's business, ordered by name
    """
    services = _active_services(db, identity)
    return ServiceListResponse(
        business_id=identity.business_id,
        services=[ServiceSchema.model_validate(s) for s in services],
    )


@router.get("/services/{service_id}/price", response_model=ServicePriceResponse)
def get_price(
    service_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Price used to pre-fill the sale amount; null when the service is not offered"""
    price = get_service_price(_active_services(db, identity), service_id)
    return ServicePriceResponse(service_id=service_id, price=price)
