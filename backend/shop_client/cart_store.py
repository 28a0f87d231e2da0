# backend/shop_client/cart_store.py
"""Client-side cart: the storefront's working selection before checkout.

Lines are kept in insertion order, one per product id. Every mutation is
written to local storage and handed to an optional ``on_change`` hook,
which the API client uses to mirror the cart onto the server.
"""
import json
import logging
from dataclasses import dataclass, asdict
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

ProductId = Union[int, str]


@dataclass
class CartLine:
    id: ProductId
    name: str
    price: Decimal
    qty: int = 1
    image: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.qty

    def to_dict(self) -> dict:
        data = asdict(self)
        data["price"] = str(self.price)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLine":
        return cls(
            id=data["id"],
            name=data["name"],
            price=Decimal(str(data["price"])),
            qty=int(data.get("qty", 1)),
            image=data.get("image"),
        )


class LocalCartStorage:
    """JSON file standing in for the browser's local storage."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[CartLine]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [CartLine.from_dict(item) for item in raw]
        except (ValueError, KeyError, TypeError):
            logger.warning("Ignoring unreadable cart file %s", self.path)
            return []

    def save(self, lines: Iterable[CartLine]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps([line.to_dict() for line in lines]), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class CartStore:
    def __init__(
        self,
        storage: Optional[LocalCartStorage] = None,
        on_change: Optional[Callable[[List[CartLine]], None]] = None,
        lines: Optional[Iterable[CartLine]] = None,
    ):
        self.storage = storage
        self.on_change = on_change
        if lines is None and storage is not None:
            lines = storage.load()
        self._lines: List[CartLine] = list(lines or [])
        # Everything in the cart starts out selected for checkout
        self._selected = {line.id for line in self._lines}

    # --- reads ---
    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, product_id: ProductId) -> Optional[CartLine]:
        return next((line for line in self._lines if line.id == product_id), None)

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def item_count(self) -> int:
        return sum(line.qty for line in self._lines)

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines), Decimal("0"))

    # --- mutations ---
    def add(self, product: Union[Mapping[str, Any], CartLine]) -> CartLine:
        """Add one unit of ``product``; accepts a catalog dict or an existing line."""
        if isinstance(product, CartLine):
            product = product.to_dict()
        line = self.get(product["id"])
        if line:
            line.qty += 1
        else:
            line = CartLine(
                id=product["id"],
                name=product["name"],
                price=Decimal(str(product["price"])),
                qty=1,
                image=product.get("image"),
            )
            self._lines.append(line)
            self._selected.add(line.id)
        self._changed()
        return line

    def decrease(self, product_id: ProductId) -> None:
        line = self.get(product_id)
        if line is None:
            return
        line.qty -= 1
        if line.qty < 1:
            self._drop(product_id)
        self._changed()

    def remove(self, product_id: ProductId) -> None:
        if self.get(product_id) is None:
            return
        self._drop(product_id)
        self._changed()

    def clear(self) -> None:
        self._lines = []
        self._selected.clear()
        self._changed()

    def replace(self, lines: Iterable[CartLine]) -> None:
        """Swap in a cart restored from the server at login."""
        self._lines = list(lines)
        self._selected = {line.id for line in self._lines}
        self._changed()

    def discard(self, product_ids: Iterable[ProductId]) -> None:
        """Drop lines locally without notifying ``on_change``.

        Used after checkout: the server has already cleared its copy, and
        the remaining lines go back up with the next regular mutation.
        """
        for product_id in list(product_ids):
            self._drop(product_id)
        self._persist()

    # --- selection ---
    def is_selected(self, product_id: ProductId) -> bool:
        return product_id in self._selected

    def toggle_select(self, product_id: ProductId) -> bool:
        if self.get(product_id) is None:
            return False
        if product_id in self._selected:
            self._selected.discard(product_id)
            return False
        self._selected.add(product_id)
        return True

    def selected_lines(self) -> List[CartLine]:
        return [line for line in self._lines if line.id in self._selected]

    def selected_total(self) -> Decimal:
        return sum((line.subtotal for line in self.selected_lines()), Decimal("0"))

    # --- internals ---
    def _drop(self, product_id: ProductId) -> None:
        self._lines = [line for line in self._lines if line.id != product_id]
        self._selected.discard(product_id)

    def _persist(self) -> None:
        if self.storage is not None:
            self.storage.save(self._lines)

    def _changed(self) -> None:
        self._persist()
        if self.on_change is not None:
            self.on_change(self.lines)
