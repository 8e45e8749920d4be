"""Auth Routes — registration, login and the bearer gate.

Invariants:
    - Duplicate username -> 409; short/missing password -> 400
    - Wrong password and unknown user return the SAME 401 body message
    - Missing, malformed, forged and expired tokens are all 401 with a Bearer challenge
"""

from datetime import datetime, timedelta, timezone

from loantracker.core.domain_types import Identity, UserId
from loantracker.core.token_service import TokenService


async def test_register_returns_201(client):
    res = await client.post(
        "/api/auth/register", json={"username": "alice", "password": "secret123"},
    )
    assert res.status_code == 201
    assert res.json() == {"message": "User registered successfully", "username": "alice"}


async def test_register_strips_username(client):
    res = await client.post(
        "/api/auth/register", json={"username": "  alice ", "password": "secret123"},
    )
    assert res.json()["username"] == "alice"


async def test_duplicate_username_conflicts(client):
    body = {"username": "alice", "password": "secret123"}
    await client.post("/api/auth/register", json=body)
    res = await client.post(
        "/api/auth/register", json={"username": "alice", "password": "other-pass"},
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_short_password_rejected(client):
    res = await client.post(
        "/api/auth/register", json={"username": "alice", "password": "12345"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["context"]["field"] == "password"


async def test_overlong_password_rejected(client):
    res = await client.post(
        "/api/auth/register", json={"username": "alice", "password": "p" * 73},
    )
    assert res.status_code == 400
    assert res.json()["error"]["context"]["field"] == "password"


async def test_login_does_not_accept_password_extended_past_72_bytes(client):
    password = "p" * 72
    await client.post(
        "/api/auth/register", json={"username": "alice", "password": password},
    )
    res = await client.post(
        "/api/auth/login", json={"username": "alice", "password": password + "x"},
    )
    assert res.status_code == 401
    ok = await client.post(
        "/api/auth/login", json={"username": "alice", "password": password},
    )
    assert ok.status_code == 200


async def test_missing_password_rejected(client):
    res = await client.post("/api/auth/register", json={"username": "alice"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_blank_username_rejected(client):
    res = await client.post(
        "/api/auth/register", json={"username": "   ", "password": "secret123"},
    )
    assert res.status_code == 400


async def test_login_returns_token_and_username(client, token_service):
    await client.post(
        "/api/auth/register", json={"username": "alice", "password": "secret123"},
    )
    res = await client.post(
        "/api/auth/login", json={"username": "alice", "password": "secret123"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["username"] == "alice"
    assert token_service.verify(body["token"]).username == "alice"


async def test_wrong_password_and_unknown_user_look_identical(client):
    await client.post(
        "/api/auth/register", json={"username": "alice", "password": "secret123"},
    )
    wrong_password = await client.post(
        "/api/auth/login", json={"username": "alice", "password": "nope-nope"},
    )
    unknown_user = await client.post(
        "/api/auth/login", json={"username": "nobody", "password": "secret123"},
    )
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert (
        wrong_password.json()["error"]["message"]
        == unknown_user.json()["error"]["message"]
        == "Invalid username or password"
    )


async def test_protected_route_without_token_is_401(client):
    res = await client.get("/api/payments")
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"
    assert res.json()["error"]["message"] == "Access token is required"


async def test_non_bearer_scheme_is_401(client):
    res = await client.get(
        "/api/payments", headers={"Authorization": "Basic YWxpY2U6c2VjcmV0"},
    )
    assert res.status_code == 401


async def test_garbage_token_is_401(client):
    res = await client.get(
        "/api/payments", headers={"Authorization": "Bearer not-a-token"},
    )
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Invalid or expired token"


async def test_forged_token_is_401(client):
    forged = TokenService("attacker-secret").issue(
        Identity(user_id=UserId(1), username="alice"),
    )
    res = await client.get(
        "/api/payments", headers={"Authorization": f"Bearer {forged}"},
    )
    assert res.status_code == 401


async def test_expired_token_is_401(client, token_secret):
    two_hours_ago = datetime.now(timezone.utc) - timedelta(hours=2)
    expired = TokenService(token_secret, clock=lambda: two_hours_ago).issue(
        Identity(user_id=UserId(1), username="alice"),
    )
    res = await client.get(
        "/api/payments", headers={"Authorization": f"Bearer {expired}"},
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"


async def test_valid_token_is_accepted(client, login_as):
    headers = await login_as("alice")
    res = await client.get("/api/payments", headers=headers)
    assert res.status_code == 200
    assert res.json() == []
