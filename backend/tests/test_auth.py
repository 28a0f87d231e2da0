from datetime import datetime, timedelta, timezone

from config import settings
from models.kv import KeyValueEntry
from models.log import Log
from utils.kv_store import KeyValueStore, otp_key


def _register(client, contact, name="Asha", password="pass1234"):
    otp = client.post("/api/auth/otp", json={"contact": contact}).json()["mockOtp"]
    return client.post("/api/auth/register", json={
        "contact": contact, "otp": otp, "name": name, "password": password,
    })


def test_register_with_email_then_login(client):
    res = _register(client, "Asha@Example.com")
    assert res.status_code == 200
    body = res.json()
    assert body["email"] == "asha@example.com"
    assert body["phone"] is None
    assert body["role"] == "user"
    assert body["isAdmin"] is False
    assert body["cart"] == []
    assert body["access_token"]

    login = client.post("/api/auth/login", json={"contact": "asha@example.com", "password": "pass1234"})
    assert login.status_code == 200
    assert login.json()["id"] == body["id"]


def test_register_with_phone_uses_placeholder_email(client):
    body = _register(client, "9000011111").json()
    assert body["phone"] == "9000011111"
    assert body["email"] == "9000011111@mobile"


def test_otp_is_single_use(client, db):
    contact = "single@example.com"
    otp = client.post("/api/auth/otp", json={"contact": contact}).json()["mockOtp"]
    assert len(otp) == 4 and otp.isdigit()

    first = client.post("/api/auth/register", json={"contact": contact, "otp": otp, "name": "A", "password": "abcd"})
    assert first.status_code == 200
    assert db.get(KeyValueEntry, otp_key(contact)) is None


def test_wrong_otp_is_rejected_and_logged(client, db):
    client.post("/api/auth/otp", json={"contact": "x@example.com"})
    res = client.post("/api/auth/register", json={
        "contact": "x@example.com", "otp": "not-it", "name": "X", "password": "abcd",
    })
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid OTP"
    assert db.query(Log).filter(Log.action == "REGISTER", Log.status == "FAIL").count() == 1


def test_expired_otp_is_rejected(client, db):
    contact = "late@example.com"
    otp = client.post("/api/auth/otp", json={"contact": contact}).json()["mockOtp"]
    entry = db.get(KeyValueEntry, otp_key(contact))
    entry.expires_at = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(seconds=1)
    db.commit()

    res = client.post("/api/auth/register", json={"contact": contact, "otp": otp, "name": "L", "password": "abcd"})
    assert res.status_code == 400


def test_otp_for_existing_contact(client, customer):
    res = client.post("/api/auth/otp", json={"contact": "RAVI@example.com"})
    assert res.status_code == 400
    assert res.json()["message"] == "User exists"


def test_login_by_phone(client, customer):
    res = client.post("/api/auth/login", json={"contact": "9876500000", "password": "secret123"})
    assert res.status_code == 200
    assert res.json()["name"] == "Ravi Kumar"


def test_bad_credentials(client, customer):
    wrong = client.post("/api/auth/login", json={"contact": "ravi@example.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"contact": "ghost@example.com", "password": "nope"})
    for res in (wrong, unknown):
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid Credentials"


def test_admin_login_marks_presence(client):
    assert client.get("/api/chat/status").json() == {"online": False}
    res = client.post("/api/auth/login", json={"contact": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD})
    assert res.json()["role"] == "admin"
    assert client.get("/api/chat/status").json() == {"online": True}


def test_kv_store_ttl_and_purge(db):
    store = KeyValueStore(db)
    store.set("k", {"a": 1}, ttl_seconds=60)
    store.set("gone", "x", ttl_seconds=0)
    store.set("stale", "y", ttl_seconds=-5)
    store.set("forever", [1, 2])

    assert store.get("k") == {"a": 1}
    assert store.get("gone") is None
    assert store.get("forever") == [1, 2]
    assert store.purge_expired() == 1
    assert store.get("stale", default="missing") == "missing"

    store.delete("k")
    assert store.get("k") is None


def test_requesting_an_otp_clears_expired_codes(client, db):
    stale = otp_key("abandoned@example.com")
    db.add(KeyValueEntry(
        key=stale, value='"1234"',
        expires_at=datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=5),
    ))
    db.commit()

    assert client.post("/api/auth/otp", json={"contact": "fresh@example.com"}).status_code == 200

    db.expire_all()
    assert db.get(KeyValueEntry, stale) is None
    assert db.get(KeyValueEntry, otp_key("fresh@example.com")) is not None
