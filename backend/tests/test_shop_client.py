import json
from decimal import Decimal

import httpx
import pytest

from models.order import Order
from models.users import User
from shop_client.api import PaymentVerificationFailed, StorefrontClient, StorefrontError
from utils.razorpay_client import compute_signature


@pytest.fixture
def storefront(client):
    return StorefrontClient("http://testserver/api", http=client)


def _confirmation(payment_id="pay_1", secret="test_secret"):
    return {
        "razorpay_order_id": "order_TEST123",
        "razorpay_payment_id": payment_id,
        "razorpay_signature": compute_signature("order_TEST123", payment_id, secret),
    }


def _server_cart(db, user_id):
    db.expire_all()
    return json.loads(db.get(User, user_id).cart_data)


def test_checkout_of_selected_lines(storefront, db, customer, drill, hammer, gateway_requests, tmp_path_cart):
    session = storefront.login("ravi@example.com", "secret123", cart_path=tmp_path_cart)
    assert len(session.cart) == 0

    catalog = {p["name"]: p for p in storefront.products()}
    session.cart.add(catalog["Drill"])
    session.cart.add(catalog["Drill"])
    session.cart.add(catalog["Claw Hammer"])
    assert _server_cart(db, customer.id) == [
        {"name": "Drill", "price": "1000.00", "quantity": 2},
        {"name": "Claw Hammer", "price": "349.00", "quantity": 1},
    ]

    session.cart.toggle_select(hammer.id)
    gateway_order = storefront.start_checkout(session)
    assert gateway_order["id"] == "order_TEST123"
    assert gateway_requests[0]["body"]["amount"] == 200000

    order_id = storefront.complete_checkout(session, _confirmation())

    # Only the unselected hammer stays in the local cart; the server copy is empty
    assert [line.id for line in session.cart.lines] == [hammer.id]
    assert _server_cart(db, customer.id) == []

    history = storefront.orders(session.user_id)
    assert [o["id"] for o in history] == [order_id]
    assert history[0]["total_amount"] == "2000.00"
    assert [(i["product_name"], i["quantity"]) for i in history[0]["order_items"]] == [("Drill", 2)]
    assert history[0]["payment_id"] == "pay_1"

    assert storefront.invoice_pdf(order_id).startswith(b"%PDF")


def test_next_mutation_pushes_remaining_lines_again(storefront, db, customer, drill, hammer):
    session = storefront.login("ravi@example.com", "secret123")
    session.cart.add({"id": drill.id, "name": "Drill", "price": "1000.00"})
    session.cart.add({"id": hammer.id, "name": "Claw Hammer", "price": "349.00"})
    session.cart.toggle_select(hammer.id)

    storefront.complete_checkout(session, _confirmation())
    assert _server_cart(db, customer.id) == []

    session.cart.add({"id": hammer.id, "name": "Claw Hammer", "price": "349.00"})
    assert _server_cart(db, customer.id) == [{"name": "Claw Hammer", "price": "349.00", "quantity": 2}]


def test_login_restores_cart_from_server(storefront, db, customer, drill):
    customer.cart_data = json.dumps([{"name": "Drill", "price": "1000.00", "quantity": 3}])
    db.commit()

    session = storefront.login("9876500000", "secret123")
    line = session.cart.get(drill.id)
    assert line.qty == 3
    assert line.price == Decimal("1000.00")
    assert line.image == "drill.png"
    assert session.cart.is_selected(drill.id)


def test_login_keeps_local_cart_when_server_is_empty(storefront, customer, tmp_path_cart):
    tmp_path_cart.write_text(json.dumps([{"id": 5, "name": "Tape", "price": "199.00", "qty": 1}]), encoding="utf-8")
    session = storefront.login("ravi@example.com", "secret123", cart_path=tmp_path_cart)
    assert [line.name for line in session.cart.lines] == ["Tape"]


def test_failed_verification_keeps_cart_and_creates_no_order(storefront, db, customer, drill):
    session = storefront.login("ravi@example.com", "secret123")
    session.cart.add({"id": drill.id, "name": "Drill", "price": "1000.00"})

    with pytest.raises(PaymentVerificationFailed) as exc:
        storefront.complete_checkout(session, _confirmation(secret="forged"))

    assert exc.value.message == "Payment Verification Failed"
    assert [line.id for line in session.cart.lines] == [drill.id]
    assert db.query(Order).count() == 0
    assert _server_cart(db, customer.id) == [{"name": "Drill", "price": "1000.00", "quantity": 1}]


def test_checkout_needs_a_selection(storefront, customer, drill):
    session = storefront.login("ravi@example.com", "secret123")
    with pytest.raises(StorefrontError, match="Select items to buy"):
        storefront.start_checkout(session)

    session.cart.add({"id": drill.id, "name": "Drill", "price": "1000.00"})
    session.cart.toggle_select(drill.id)
    with pytest.raises(StorefrontError, match="Select items to buy"):
        storefront.start_checkout(session)


def test_bad_login_surfaces_server_message(storefront, customer):
    with pytest.raises(StorefrontError) as exc:
        storefront.login("ravi@example.com", "wrong")
    assert exc.value.message == "Invalid Credentials"
    assert exc.value.status_code == 401


def test_cart_push_failure_is_swallowed(storefront):
    assert storefront.push_cart(4242, []) is False


def test_network_errors_are_wrapped():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    with StorefrontClient("http://shop.invalid/api", transport=httpx.MockTransport(unreachable)) as offline:
        with pytest.raises(StorefrontError, match="Network Error"):
            offline.products()
        with pytest.raises(StorefrontError, match="Payment Error"):
            offline.verify_payment("order_1", "pay_1", "sig")
        assert offline.push_cart(1, []) is False
