"""Human-readable identifiers for receipts, sales and gateway payments"""

import secrets
import string
import time
import uuid
from datetime import datetime, timezone

_BASE36 = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    """Encode a non-negative integer in upper-case base 36"""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def _millis() -> int:
    return int(time.time() * 1000)


def generate_payment_receipt_number(millis: int | None = None) -> str:
    """PAY-<base36 ms timestamp>, e.g. PAY-MGXK3Q2A"""
    return f"PAY-{to_base36(millis if millis is not None else _millis())}"


def sale_receipt_number(sale_id: uuid.UUID) -> str:
    """RCP-<first 8 hex digits of the sale id>"""
    return f"RCP-{sale_id.hex[:8].upper()}"


def generate_sale_number(now: datetime | None = None) -> str:
    """SL-<yyyymmdd>-<6 random hex>"""
    now = now or datetime.now(timezone.utc)
    return f"SL-{now:%Y%m%d}-{secrets.token_hex(3).upper()}"


def generate_payment_reference(prefix: str = "PAY", millis: int | None = None) -> str:
    """<prefix>-<ms timestamp>-<7 random upper alphanumerics>"""
    stamp = millis if millis is not None else _millis()
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"{prefix}-{stamp}-{suffix}"
