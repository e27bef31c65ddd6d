"""Dependency injection for FastAPI endpoints"""

import uuid
from fastapi import Header, HTTPException, Request
from shopdesk.domain.models import Identity, Role
from shopdesk.infrastructure.clients.gateway import GatewayClient
from shopdesk.infrastructure.clients.receipts import ReceiptClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_identity(
    x_user_id: str = Header(..., description="Authenticated user id"),
    x_business_id: str = Header(..., description="Business the user acts for"),
    x_role: str = Header("employee", description="owner | admin | employee"),
) -> Identity:
    """Build the caller identity resolved by the upstream auth layer"""
    try:
        business_id = uuid.UUID(x_business_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid business ID format")
    try:
        role = Role(x_role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown role: {x_role}")
    return Identity(user_id=x_user_id, business_id=business_id, role=role)


def get_gateway_client() -> GatewayClient:
    """Provide payment gateway client instance"""
    return GatewayClient()


def get_receipt_client() -> ReceiptClient:
    """Provide receipt renderer client instance"""
    return ReceiptClient()
