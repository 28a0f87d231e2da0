# backend/utils/razorpay_client.py
import hashlib
import hmac
import httpx
import logging
import time
from decimal import Decimal
from urllib.parse import urljoin
from config import settings

logger = logging.getLogger(__name__)

MINOR_UNITS_PER_MAJOR = 100


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (rupees) to minor units (paise) exactly."""
    minor = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
    if minor != minor.to_integral_value():
        raise ValueError(f"Amount {amount} has more precision than the currency allows")
    return int(minor)


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class RazorpayClient:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.api_url = settings.RAZORPAY_API_URL
        self.key_id = settings.RAZORPAY_KEY_ID
        self.key_secret = settings.RAZORPAY_KEY_SECRET
        self.currency = settings.PAYMENT_CURRENCY
        # Tests plug in httpx.MockTransport here
        self.transport = transport

    async def create_order(self, amount) -> dict:
        # Register a payment order with the gateway; the widget later pays against its id
        order_url = urljoin(self.api_url, "/v1/orders")
        payload = {
            "amount": to_minor_units(amount),
            "currency": self.currency,
            "receipt": f"order_{int(time.time() * 1000)}",
        }
        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.post(order_url, json=payload, auth=(self.key_id, self.key_secret))
                response.raise_for_status()
                return response.json()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                try:
                    resp_text = e.response.text if getattr(e, "response", None) is not None else str(e)
                except Exception:
                    resp_text = str(e)
                logger.error("Razorpay create order error: %s", resp_text)
                raise

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Checks the checkout callback signature: HMAC-SHA256 of "order_id|payment_id"."""
        if not (order_id and payment_id and signature):
            return False
        expected = compute_signature(order_id, payment_id, self.key_secret)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


razorpay_client = RazorpayClient()

def get_payment_client() -> RazorpayClient:
    return razorpay_client
