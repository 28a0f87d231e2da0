# backend/utils/cart_snapshot.py
"""Serialization of the mirrored cart stored on ``users.cart_data``.

The snapshot keeps only ``name``, ``price`` and ``quantity`` per line.
Product ids and images are dropped, so restoring a cart means looking
products up again by exact name. A renamed or deleted product therefore
comes back as a line with a placeholder id and no image.
"""
import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Sequence
from uuid import uuid4

from pydantic import ValidationError

from models.product import Product
from schemas.cart import CartLineIn, RestoredCartLine
from schemas.common import TWO_PLACES, format_money

logger = logging.getLogger(__name__)

EMPTY_SNAPSHOT = "[]"


def serialize_snapshot(lines: Iterable[CartLineIn]) -> str:
    return json.dumps([
        {"name": line.name, "price": format_money(line.price), "quantity": line.qty}
        for line in lines
    ])


def parse_snapshot(raw: str | None) -> List[dict]:
    """Decode a stored snapshot, returning [] for empty or malformed data."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Discarding malformed cart snapshot")
        return []
    if not isinstance(data, list):
        return []
    return [entry for entry in data if isinstance(entry, dict) and _has_name(entry)]


def _has_name(entry: dict) -> bool:
    name = entry.get("name")
    return isinstance(name, str) and bool(name)


def placeholder_id() -> str:
    return f"tmp-{uuid4().hex[:12]}"


def rehydrate(entries: Sequence[dict], products: Sequence[Product]) -> List[RestoredCartLine]:
    # First product per name wins, matching catalog order
    by_name = {}
    for p in products:
        by_name.setdefault(p.name, p)

    restored = []
    for entry in entries:
        if not _has_name(entry):
            continue
        # Older rows were written with a capitalised key
        qty = entry.get("quantity", entry.get("Quantity", 1))
        product = by_name.get(entry["name"])
        try:
            qty = int(qty)
            # Out-of-range values raise here instead of when the response is serialized
            price = Decimal(str(entry.get("price", "0"))).quantize(TWO_PLACES)
            if qty < 1 or not price.is_finite() or price < 0:
                continue
            line = RestoredCartLine(
                id=product.id if product else placeholder_id(),
                name=entry["name"],
                price=price,
                image=product.image if product else None,
                qty=qty,
            )
        except (TypeError, ValueError, InvalidOperation, ValidationError):
            logger.warning("Skipping unreadable snapshot entry %r", entry)
            continue
        restored.append(line)
    return restored
