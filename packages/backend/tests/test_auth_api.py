"""Auth API tests.

Learn: Tests cover:
1. User registration + duplicate prevention
2. Input validation (400 with an "error" message)
3. Login → JWT session token
4. Enumeration resistance (same 401 for unknown user and wrong password)
5. Protected /me endpoint and every way its bearer check can fail
"""

from datetime import datetime, timedelta, timezone

import pytest


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_user(client):
    r = await client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "pw123", "email": "alice@x.com"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User registered successfully"
    assert body["username"] == "alice"
    assert body["email"] == "alice@x.com"
    assert isinstance(body["user_id"], int)
    assert "password" not in body
    assert "password_hash" not in body


@pytest.mark.asyncio
async def test_register_duplicate_username(client, register_user):
    await register_user("alice", email="alice@x.com")
    r = await client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "pw123", "email": "other@x.com"},
    )
    assert r.status_code == 409
    assert r.json() == {"error": "Username or email already exists"}


@pytest.mark.asyncio
async def test_register_duplicate_email(client, register_user):
    await register_user("alice", email="alice@x.com")
    r = await client.post(
        "/api/auth/register",
        json={"username": "alice2", "password": "pw123", "email": "alice@x.com"},
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_register_invalid_email(client):
    r = await client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "pw123", "email": "not-an-email"},
    )
    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid input:")
    assert "email" in r.json()["error"]


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["username", "password", "email"])
async def test_register_missing_field(client, missing):
    body = {"username": "alice", "password": "pw123", "email": "alice@x.com"}
    del body[missing]
    r = await client.post("/api/auth/register", json=body)
    assert r.status_code == 400
    assert missing in r.json()["error"]


@pytest.mark.asyncio
async def test_register_empty_password(client):
    r = await client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "", "email": "alice@x.com"},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_register_non_json_body(client):
    r = await client.post(
        "/api/auth/register",
        content=b"username=alice",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert "error" in r.json()


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(client, register_user):
    await register_user("alice", "pw123")
    r = await client.post(
        "/api/auth/login", json={"username": "alice", "password": "pw123"}
    )
    assert r.status_code == 200
    body = r.json()
    assert body["token"].count(".") == 2
    assert body["token_type"] == "bearer"
    expires_at = datetime.fromisoformat(body["expires_at"].replace("Z", "+00:00"))
    remaining = expires_at - datetime.now(timezone.utc)
    assert timedelta(hours=23) < remaining <= timedelta(hours=24)


@pytest.mark.asyncio
async def test_login_wrong_password_same_as_unknown_user(client, register_user):
    await register_user("alice", "pw123")

    wrong_pw = await client.post(
        "/api/auth/login", json={"username": "alice", "password": "wrongpw"}
    )
    no_user = await client.post(
        "/api/auth/login", json={"username": "nobody", "password": "pw123"}
    )

    assert wrong_pw.status_code == no_user.status_code == 401
    assert wrong_pw.json() == no_user.json() == {"error": "Invalid username or password"}


@pytest.mark.asyncio
async def test_login_missing_password(client):
    r = await client.post("/api/auth/login", json={"username": "alice"})
    assert r.status_code == 400


# ═══════════════════════════════════════════════════════════
# Protected endpoint (/me)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(client, login_user):
    headers = await login_user("alice")
    r = await client.get("/api/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["username"] == "alice"
    assert r.json()["email"] == "alice@mail.com"


@pytest.mark.asyncio
async def test_me_without_token(client):
    r = await client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Authorization token required"}
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    ["Token abc", "bearer abc", "Bearer", "Bearer ", "Basic YWxpY2U6cHc="],
)
async def test_me_with_malformed_header(client, header):
    r = await client.get("/api/auth/me", headers={"Authorization": header})
    assert r.status_code == 401
    assert r.json() == {"error": "Authorization token required"}


@pytest.mark.asyncio
async def test_me_with_invalid_token(client):
    r = await client.get(
        "/api/auth/me", headers={"Authorization": "Bearer invalid_token_here"}
    )
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_me_with_expired_token(client, app, register_user):
    user = await register_user("alice")
    token, _ = app.state.tokens.issue(
        user_id=user["user_id"],
        username="alice",
        now=datetime.now(timezone.utc) - timedelta(hours=24, seconds=5),
    )
    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_me_with_malformed_claims(client, settings):
    import jwt

    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = jwt.encode(
        {"user_id": "alice", "exp": exp}, settings.jwt_secret, algorithm="HS256"
    )
    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json() == {"error": "Token claims invalid"}
