import os
import tempfile
from pathlib import Path

# Settings are read at import time, so the environment is prepared first
_TMP_DIR = Path(tempfile.mkdtemp(prefix="storefront-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_secret"
os.environ["CHAT_BOT_REPLY_DELAY_SECONDS"] = "0"
os.environ["OTP_MOCK"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

import json
from decimal import Decimal

import httpx
import pytest
from fastapi.testclient import TestClient

from config import settings
from database import Base, engine, SessionLocal
from main import app
from models.product import Product
from models.users import User
from populate_db import seed_admin
from utils.hashing import get_password_hash
from utils.razorpay_client import RazorpayClient, get_payment_client


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_admin(db)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def gateway_requests():
    """Stub Razorpay: records requests and answers like the orders API."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append({"url": str(request.url), "headers": dict(request.headers), "body": body})
        return httpx.Response(200, json={
            "id": "order_TEST123",
            "entity": "order",
            "amount": body["amount"],
            "currency": body["currency"],
            "receipt": body["receipt"],
            "status": "created",
        })

    app.dependency_overrides[get_payment_client] = lambda: RazorpayClient(transport=httpx.MockTransport(handler))
    return seen


@pytest.fixture
def customer(db):
    user = User(
        name="Ravi Kumar",
        email="ravi@example.com",
        phone="9876500000",
        password_hash=get_password_hash("secret123"),
        cart_data="[]",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def drill(db):
    product = Product(name="Drill", category="Power Tools", price=Decimal("1000.00"), stock=5, image="drill.png")
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def hammer(db):
    product = Product(name="Claw Hammer", category="Hand Tools", price=Decimal("349.00"), stock=10, image="hammer.png")
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def admin_headers(client):
    res = client.post("/api/auth/login", json={"contact": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture
def tmp_path_cart(tmp_path):
    return tmp_path / "cart.json"
