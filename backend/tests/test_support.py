import pytest

from config import settings
from utils.chat_bot import DEFAULT_REPLY, pick_reply


@pytest.mark.parametrize("text, expected", [
    ("What is the PRICE of this?", "Prices are listed on the product page."),
    ("delivery to Pune?", "We deliver within 24-48 hours."),
    ("hello there", "Hello! I am the Umang AI Assistant."),
    ("price and delivery", "Prices are listed on the product page."),
    ("anything else", DEFAULT_REPLY),
])
def test_pick_reply(text, expected):
    assert pick_reply(text) == expected


def test_bot_answers_when_no_admin_is_online(client, customer):
    res = client.post("/api/chat/send", json={"userId": customer.id, "text": "Delivery time?"})
    assert res.status_code == 200
    assert res.json()["sender"] == "user"

    thread = client.get(f"/api/chat/{customer.id}").json()
    assert [(m["sender"], m["text"]) for m in thread] == [
        ("user", "Delivery time?"),
        ("bot", "We deliver within 24-48 hours."),
    ]


def test_no_bot_reply_while_admin_is_online(client, customer, admin_headers):
    assert client.get("/api/chat/status").json() == {"online": True}

    client.post("/api/chat/send", json={"userId": customer.id, "text": "hello"})
    client.post("/api/chat/send", json={"userId": customer.id, "text": "On it", "sender": "admin"})

    thread = client.get(f"/api/chat/{customer.id}").json()
    assert [m["sender"] for m in thread] == ["user", "admin"]


def test_send_for_unknown_user(client):
    res = client.post("/api/chat/send", json={"userId": 999, "text": "hi"})
    assert res.status_code == 404
    assert res.json()["message"] == "User not found. Please relogin."


def test_admin_sees_threads(client, customer, admin_headers):
    client.post("/api/chat/send", json={"userId": customer.id, "text": "Need help"})

    threads = client.get("/api/admin/chats", headers=admin_headers).json()
    assert len(threads) == 1
    assert threads[0]["id"] == customer.id
    assert threads[0]["chat_messages"][0]["text"] == "Need help"


def test_call_requests(client, customer, admin_headers):
    res = client.post("/api/support/call-request", json={"userId": customer.id, "name": "Ravi", "phone": "9876500000"})
    assert res.json() == {"success": True}

    pending = client.get("/api/admin/call-requests", headers=admin_headers).json()
    assert len(pending) == 1
    assert pending[0]["status"] == "Pending"

    done = client.put(f"/api/admin/call-requests/{pending[0]['id']}", headers=admin_headers)
    assert done.json() == {"success": True}
    assert client.get("/api/admin/call-requests", headers=admin_headers).json()[0]["status"] == "Called"

    assert client.put("/api/admin/call-requests/999", headers=admin_headers).status_code == 404
    assert client.post("/api/support/call-request", json={"phone": "12"}).status_code == 422


def test_admin_lists_and_deletes_users(client, db, customer, admin_headers):
    users = client.get("/api/users", headers=admin_headers, params={"q": "ravi"}).json()
    assert [u["email"] for u in users] == ["ravi@example.com"]

    client.post("/api/chat/send", json={"userId": customer.id, "text": "bye"})
    res = client.delete(f"/api/users/{customer.id}", headers=admin_headers)
    assert res.json() == {"success": True}
    assert client.get(f"/api/chat/{customer.id}").json() == []


def test_admin_cannot_delete_self(client, admin_headers):
    me = client.get("/api/users", headers=admin_headers, params={"q": "admin"}).json()[0]
    res = client.delete(f"/api/users/{me['id']}", headers=admin_headers)
    assert res.status_code == 400


def test_profile_update(client, customer):
    res = client.put(f"/api/users/{customer.id}", json={"name": "Ravi K", "isPrime": True})
    assert res.json() == {"message": "Updated"}

    login = client.post("/api/auth/login", json={"contact": "ravi@example.com", "password": "secret123"}).json()
    assert login["name"] == "Ravi K"
    assert login["isPrime"] is True


def test_profile_update_rejects_taken_email(client, customer):
    res = client.put(f"/api/users/{customer.id}", json={"email": settings.ADMIN_EMAIL.upper()})
    assert res.status_code == 400


def test_profile_update_rejects_null_for_required_fields(client, customer):
    for body in ({"name": None, "isPrime": None}, {"email": None}, {"isPrime": None}):
        res = client.put(f"/api/users/{customer.id}", json=body)
        assert res.status_code == 422, body

    login = client.post("/api/auth/login", json={"contact": "ravi@example.com", "password": "secret123"}).json()
    assert (login["name"], login["email"]) == ("Ravi Kumar", "ravi@example.com")


def test_profile_update_can_clear_phone(client, customer):
    res = client.put(f"/api/users/{customer.id}", json={"phone": None})
    assert res.json() == {"message": "Updated"}
    assert client.post("/api/auth/login", json={"contact": "9876500000", "password": "secret123"}).status_code == 401
