import secrets
from datetime import datetime, timezone

from slugify import slugify as _slugify


def slugify(value: str) -> str:
    return _slugify(value or "") or "item"


def generate_order_number() -> str:
    date_part = datetime.now(timezone.utc).strftime("%Y%m%d")
    return f"ORD-{date_part}-{secrets.token_hex(3).upper()}"
