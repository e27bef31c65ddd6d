"""Hosted-checkout payment intents and their metadata record"""

from dataclasses import asdict, dataclass, fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Optional
from shopdesk.domain.exceptions import ValidationError

METADATA_VERSION = 1
SUPPORTED_GATEWAYS = ("paystack", "flutterwave")


@dataclass(frozen=True)
class PaymentMetadata:
    """Closed set of metadata fields forwarded to the gateway"""

    version: int = METADATA_VERSION
    sale_id: Optional[str] = None
    business_id: Optional[str] = None
    customer_name: Optional[str] = None
    sale_number: Optional[str] = None
    purpose: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class GatewayVerification:
    """Gateway's answer to a verify call"""

    reference: str
    status: str
    amount_minor: int
    channel: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


def parse_metadata(raw: Optional[Mapping[str, Any]]) -> PaymentMetadata:
    """Build a PaymentMetadata record, rejecting unknown fields and versions"""
    if not raw:
        return PaymentMetadata()

    known = {f.name for f in fields(PaymentMetadata)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValidationError(f"Unrecognized metadata fields: {', '.join(unknown)}")

    version = raw.get("version", METADATA_VERSION)
    if version != METADATA_VERSION:
        raise ValidationError(f"Unsupported metadata version: {version}")

    return PaymentMetadata(**{k: (str(v) if k != "version" and v is not None else v) for k, v in raw.items()})


def to_minor_units(amount: Decimal) -> int:
    """Major currency units to minor units, e.g. NGN 150.50 -> 15050 kobo"""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount_minor: int) -> Decimal:
    return (Decimal(amount_minor) / 100).quantize(Decimal("0.01"))


def validate_gateway(gateway: str) -> str:
    if gateway not in SUPPORTED_GATEWAYS:
        raise ValidationError(f"Unsupported payment gateway: {gateway}")
    return gateway
