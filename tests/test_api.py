"""Authentication and application-level API tests."""

from datetime import UTC, datetime, timedelta

from jose import jwt

from workload_api.models.enums import Role


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client):
    """Test user registration returns a token and the public user."""
    response = client.post(
        "/api/auth/register",
        json={"username": "newuser", "email": "newuser@example.com", "password": "password123"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["tokenType"] == "bearer"
    assert data["user"]["username"] == "newuser"
    assert data["user"]["role"] == "user"
    assert data["user"]["isActive"] is True
    assert "password" not in data["user"]
    assert "passwordHash" not in data["user"]


def test_register_cannot_choose_role(client):
    """Test that a role in the registration body is ignored."""
    response = client.post(
        "/api/auth/register",
        json={
            "username": "sneaky",
            "email": "sneaky@example.com",
            "password": "password123",
            "role": "admin",
        },
    )
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "user"


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email fails."""
    response = client.post(
        "/api/auth/register",
        json={"username": "different", "email": auth_headers.email, "password": "password123"},
    )
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_register_duplicate_username(client, auth_headers):
    """Test registration with duplicate username fails."""
    response = client.post(
        "/api/auth/register",
        json={
            "username": auth_headers.username,
            "email": "another@example.com",
            "password": "password123",
        },
    )
    assert response.status_code == 400


def test_register_reports_all_violations(client):
    """Test that every invalid field is reported, not just the first."""
    response = client.post(
        "/api/auth/register",
        json={"username": "ab", "email": "not-an-email", "password": "123"},
    )
    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Validation failed"
    fields = {error["field"] for error in data["errors"]}
    assert fields == {"username", "email", "password"}


def test_login(client, auth_headers):
    """Test user login sets last login."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["lastLogin"] is not None


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid login credentials"


def test_login_unknown_email(client):
    """Test login with an unknown email."""
    response = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "password123"}
    )
    assert response.status_code == 401


def test_login_deactivated_user(client, make_user):
    """Test that deactivated accounts cannot log in."""
    headers = make_user("dormant", is_active=False)
    response = client.post(
        "/api/auth/login", json={"email": headers.email, "password": "password123"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Account is deactivated"


def test_get_profile(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/auth/profile", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == auth_headers.email
    assert "passwordHash" not in data


def test_unauthorized_access(client):
    """Test that endpoints require authentication."""
    response = client.get("/api/workload")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_invalid_token(client):
    """Test that a malformed token is rejected."""
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401


def test_non_bearer_scheme(client):
    """Test that a non-bearer Authorization header is rejected."""
    response = client.get("/api/auth/profile", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401


def test_expired_token(client, auth_headers):
    """Test that an expired token is rejected."""
    token = jwt.encode(
        {"sub": str(auth_headers.user_id), "exp": datetime.now(UTC) - timedelta(minutes=1)},
        "test-secret",
        algorithm="HS256",
    )
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_signed_with_other_secret(client, auth_headers):
    """Test that a token with a foreign signature is rejected."""
    token = jwt.encode(
        {"sub": str(auth_headers.user_id), "exp": datetime.now(UTC) + timedelta(hours=1)},
        "some-other-secret",
        algorithm="HS256",
    )
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_of_deactivated_user(client, make_user):
    """Test that a valid token for an inactive user is rejected."""
    headers = make_user("inactive", is_active=False)
    response = client.get("/api/auth/profile", headers=headers)
    assert response.status_code == 401


def test_token_of_deleted_user(client, make_user):
    """Test that a valid token for a deleted user is rejected."""
    admin = make_user("root", role=Role.ADMIN)
    victim = make_user("victim")

    response = client.delete(f"/api/users/{victim.user_id}", headers=admin)
    assert response.status_code == 200

    response = client.get("/api/auth/profile", headers=victim)
    assert response.status_code == 401


def test_logout(client, auth_headers):
    """Test logout responds with a confirmation."""
    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"


def test_change_password(client, auth_headers):
    """Test changing the password and logging in with the new one."""
    response = client.post(
        "/api/auth/change-password",
        headers=auth_headers,
        json={"currentPassword": "testpass123", "newPassword": "newpass456"},
    )
    assert response.status_code == 200

    old_login = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert old_login.status_code == 401

    new_login = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "newpass456"}
    )
    assert new_login.status_code == 200


def test_change_password_wrong_current(client, auth_headers):
    """Test that the current password must match."""
    response = client.post(
        "/api/auth/change-password",
        headers=auth_headers,
        json={"currentPassword": "wrongpass", "newPassword": "newpass456"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Current password is incorrect"


def test_change_password_requires_auth_before_validation(client):
    """Test that an unauthenticated request is rejected before its body is checked."""
    response = client.post("/api/auth/change-password", json={"newPassword": "x"})
    assert response.status_code == 401


def test_unexpected_error_returns_generic_500(app):
    """Test that unexpected failures do not leak internal detail."""
    from fastapi.testclient import TestClient

    @app.get("/boom")
    def boom():
        raise RuntimeError("database password is hunter2")

    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_unretrieved_task_exception_exits(monkeypatch):
    """Test that a failed task nobody awaited terminates the process."""
    import asyncio

    from workload_api import main

    exits = []
    monkeypatch.setattr(main.os, "_exit", exits.append)
    monkeypatch.setattr(main.logging, "shutdown", lambda: None)

    loop = asyncio.new_event_loop()
    try:
        future = loop.create_future()
        error = RuntimeError("background job failed")
        main._fatal_loop_exception(
            loop,
            {"message": "Task exception was never retrieved", "exception": error, "future": future},
        )
    finally:
        loop.close()

    assert exits == [1]


def test_callback_exception_does_not_exit(monkeypatch):
    """Test that errors outside tasks and futures go to the default handler."""
    import asyncio

    from workload_api import main

    exits = []
    handled = []
    monkeypatch.setattr(main.os, "_exit", exits.append)

    loop = asyncio.new_event_loop()
    monkeypatch.setattr(loop, "default_exception_handler", handled.append)
    try:
        context = {"message": "Exception in callback", "exception": ValueError("callback")}
        main._fatal_loop_exception(loop, context)
    finally:
        loop.close()

    assert exits == []
    assert handled == [context]


def test_password_whitespace_is_kept(client):
    """Test that surrounding spaces are part of the password."""
    response = client.post(
        "/api/auth/register",
        json={"username": "spacey", "email": "spacey@example.com", "password": "  padded pw  "},
    )
    assert response.status_code == 201

    response = client.post(
        "/api/auth/login", json={"email": "spacey@example.com", "password": "padded pw"}
    )
    assert response.status_code == 401

    response = client.post(
        "/api/auth/login", json={"email": "spacey@example.com", "password": "  padded pw  "}
    )
    assert response.status_code == 200
