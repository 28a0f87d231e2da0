# backend/shop_client/api.py
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx

from shop_client.cart_store import CartLine, CartStore, LocalCartStorage

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """Request to the storefront API failed; ``message`` is safe to show to the buyer."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PaymentVerificationFailed(StorefrontError):
    def __init__(self):
        super().__init__("Payment Verification Failed", status_code=400)


@dataclass
class Session:
    user: Dict[str, Any]
    cart: CartStore

    @property
    def user_id(self) -> int:
        return self.user["id"]


def snapshot_payload(lines: List[CartLine]) -> dict:
    return {"cart": [{"name": line.name, "price": str(line.price), "qty": line.qty} for line in lines]}


class StorefrontClient:
    def __init__(
        self,
        base_url: str,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 10.0,
        http: httpx.Client | None = None,
    ):
        # base_url points at the API root, e.g. "https://shop.example.com/api"
        self.api_root = base_url.rstrip("/")
        self._owns_http = http is None
        self.http = http or httpx.Client(transport=transport, timeout=timeout)

    def _url(self, path: str) -> str:
        return f"{self.api_root}/{path.lstrip('/')}"

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, self._url(path), **kwargs)
        except httpx.RequestError as e:
            logger.error("Storefront request %s %s failed: %s", method, path, e)
            raise StorefrontError("Network Error") from e
        if response.status_code >= 400:
            try:
                message = response.json().get("message") or response.reason_phrase
            except ValueError:
                message = response.reason_phrase
            raise StorefrontError(message, status_code=response.status_code)
        return response

    # --- session ---
    def login(self, contact: str, password: str, cart_path: Union[str, Path, None] = None) -> Session:
        data = self._request("POST", "auth/login", json={"contact": contact, "password": password}).json()
        self.http.headers["Authorization"] = f"Bearer {data['access_token']}"

        storage = LocalCartStorage(cart_path) if cart_path else None
        cart = CartStore(storage=storage, lines=[])
        restored = [CartLine.from_dict(item) for item in data.get("cart") or []]
        if restored:
            cart.replace(restored)
        elif storage is not None:
            # Nothing on the server: keep whatever was stored locally
            cart = CartStore(storage=storage)
        cart.on_change = lambda lines: self.push_cart(data["id"], lines)
        return Session(user=data, cart=cart)

    def push_cart(self, user_id: int, lines: List[CartLine]) -> bool:
        """Best-effort mirror of the cart; failures are logged and dropped."""
        try:
            self._request("PUT", f"users/{user_id}/cart", json=snapshot_payload(lines))
            return True
        except StorefrontError as e:
            logger.warning("Cart sync for user %s failed: %s", user_id, e.message)
            return False

    # --- catalog ---
    def products(self) -> List[dict]:
        return self._request("GET", "products").json()

    # --- checkout ---
    def create_payment(self, amount: Decimal) -> dict:
        return self._request("POST", "payment/create", json={"amount": str(amount)}).json()

    def verify_payment(self, razorpay_order_id: str, razorpay_payment_id: str, razorpay_signature: str) -> bool:
        try:
            response = self.http.post(self._url("payment/verify"), json={
                "razorpay_order_id": razorpay_order_id,
                "razorpay_payment_id": razorpay_payment_id,
                "razorpay_signature": razorpay_signature,
            })
        except httpx.RequestError as e:
            logger.error("Payment verification request failed: %s", e)
            raise StorefrontError("Payment Error") from e
        # 400 carries {"success": false}, anything else is a transport-level problem
        if response.status_code not in (200, 400):
            raise StorefrontError("Payment Error", status_code=response.status_code)
        return bool(response.json().get("success"))

    def create_order(self, user_id: int, lines: List[CartLine], total: Decimal, payment_id: Optional[str]) -> int:
        body = {
            "userId": user_id,
            "items": [
                {"id": line.id, "name": line.name, "qty": line.qty, "price": str(line.price), "image": line.image}
                for line in lines
            ],
            "total": str(total),
            "paymentId": payment_id,
        }
        return self._request("POST", "orders", json=body).json()["orderId"]

    def start_checkout(self, session: Session) -> dict:
        """Open a gateway order for the selected lines; the widget pays against its ``id``."""
        if not session.cart.selected_lines():
            raise StorefrontError("Select items to buy")
        return self.create_payment(session.cart.selected_total())

    def complete_checkout(self, session: Session, confirmation: Dict[str, str]) -> int:
        """
        Finish a checkout with the widget's callback fields.

        Purchased lines are dropped locally. The server clears the whole
        mirrored cart, so unselected lines live only on this side until
        the next cart mutation pushes them again.
        """
        lines = session.cart.selected_lines()
        total = session.cart.selected_total()

        verified = self.verify_payment(
            confirmation["razorpay_order_id"],
            confirmation["razorpay_payment_id"],
            confirmation["razorpay_signature"],
        )
        if not verified:
            raise PaymentVerificationFailed()

        order_id = self.create_order(session.user_id, lines, total, confirmation["razorpay_payment_id"])
        session.cart.discard([line.id for line in lines])
        return order_id

    # --- history ---
    def orders(self, user_id: int) -> List[dict]:
        return self._request("GET", f"orders/{user_id}").json()

    def invoice_pdf(self, order_id: int) -> bytes:
        return self._request("GET", f"orders/{order_id}/invoice").content
