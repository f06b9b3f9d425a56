from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from auth_service.application.services.token_issuer import HmacTokenIssuer
from auth_service.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from auth_service.application.use_cases.users.list_users import ListUsersUseCase
from auth_service.application.use_cases.users.login_user import LoginUserUseCase
from auth_service.application.use_cases.users.register_user import RegisterUserUseCase
from auth_service.domain.users.entities import AccessToken, User
from auth_service.domain.users.exceptions import (
    InvalidCredentialsError,
    ResetTokenExpiredError,
)
from auth_service.interfaces.http.controllers.auth_controller import AuthController
from auth_service.interfaces.http.controllers.users_controller import UsersController
from auth_service.shared.middleware.error_handler import configure_error_handling

SECRET = "controller-test-secret-0123456789abcdef"


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _auth_controller(**overrides: object) -> AuthController:
    deps: dict[str, object] = {
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "forgot_password_use_case": MagicMock(),
        "reset_password_use_case": MagicMock(),
    }
    deps.update(overrides)
    return AuthController(**deps)  # type: ignore[arg-type]


def test_register_returns_201_without_password_hash(flask_app: Flask) -> None:
    register_called: dict[str, tuple] = {}

    class StubRegister:
        def execute(self, name, email, password, password_confirmation) -> User:
            register_called["args"] = (name, email, password, password_confirmation)
            return User(
                id=1,
                name=name,
                email=email,
                password_hash="hash",
                created_at=datetime(2025, 1, 1, tzinfo=UTC),
            )

    controller = _auth_controller(register_use_case=cast(RegisterUserUseCase, StubRegister()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={
                "name": "Ann",
                "email": "ann@x.com",
                "password": "secret123",
                "password_confirmation": "secret123",
            },
        )

    assert response.status_code == 201
    assert register_called["args"] == ("Ann", "ann@x.com", "secret123", "secret123")
    user = response.get_json()["user"]
    assert user["id"] == 1
    assert user["email"] == "ann@x.com"
    assert "password_hash" not in user


def test_register_invalid_payload_returns_422(flask_app: Flask, users, hasher) -> None:
    controller = _auth_controller(
        register_use_case=RegisterUserUseCase(users=users, password_hasher=hasher)
    )
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/register", data="not json")

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "email" in payload["context"]["fields"]


def test_login_returns_bearer_token(flask_app: Flask) -> None:
    issued = AccessToken(
        subject=3,
        token="a.b.c",
        issued_at=datetime(2025, 1, 1, tzinfo=UTC),
        expires_at=datetime(2025, 1, 1, 1, tzinfo=UTC),
    )
    login = MagicMock(spec=LoginUserUseCase)
    login.execute.return_value = issued
    flask_app.register_blueprint(_auth_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"email": "ann@x.com", "password": "secret123"}
        )

    assert response.status_code == 200
    assert response.get_json() == {
        "access_token": "a.b.c",
        "token_type": "bearer",
        "expires_in": 3600,
    }
    login.execute.assert_called_once_with("ann@x.com", "secret123", "127.0.0.1")


def test_login_failure_maps_to_401(flask_app: Flask) -> None:
    login = MagicMock(spec=LoginUserUseCase)
    login.execute.side_effect = InvalidCredentialsError()
    flask_app.register_blueprint(_auth_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "x"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_forgot_password_is_uniform(flask_app: Flask) -> None:
    forgot = MagicMock(spec=ForgotPasswordUseCase)
    flask_app.register_blueprint(
        _auth_controller(forgot_password_use_case=forgot).as_blueprint()
    )

    with flask_app.test_client() as client:
        known = client.post("/api/auth/forgot-password", json={"email": "ann@x.com"})
        unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@x.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.get_json() == unknown.get_json() == {"status": "reset_link_sent"}


def test_reset_password_expired_maps_to_410(flask_app: Flask) -> None:
    reset = MagicMock()
    reset.execute.side_effect = ResetTokenExpiredError()
    flask_app.register_blueprint(_auth_controller(reset_password_use_case=reset).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/reset-password",
            json={"token": "t", "password": "secret123", "password_confirmation": "secret123"},
        )

    assert response.status_code == 410
    assert response.get_json() == {"error": "reset_token_expired"}


def test_unexpected_error_hides_internals(flask_app: Flask) -> None:
    reset = MagicMock()
    reset.execute.side_effect = RuntimeError("database password is hunter2")
    flask_app.register_blueprint(_auth_controller(reset_password_use_case=reset).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/reset-password", json={})

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error"}


@pytest.fixture()
def users_app(flask_app: Flask, users) -> tuple[Flask, HmacTokenIssuer]:
    issuer = HmacTokenIssuer(SECRET)
    users.create("Ann", "ann@x.com", "hashed:secret123")
    users.create("Bob", "bob@x.com", "hashed:secret123")
    controller = UsersController(list_users=ListUsersUseCase(users=users), token_issuer=issuer)
    flask_app.register_blueprint(controller.as_blueprint())
    return flask_app, issuer


def test_list_users_requires_token(users_app: tuple[Flask, HmacTokenIssuer]) -> None:
    app, issuer = users_app
    expired = issuer.issue(1, 0).token
    forged = HmacTokenIssuer("another-secret").issue(1, 60).token

    with app.test_client() as client:
        responses = [
            client.get("/api/users"),
            client.get("/api/users", headers={"Authorization": "Bearer garbage"}),
            client.get("/api/users", headers={"Authorization": f"Bearer {expired}"}),
            client.get("/api/users", headers={"Authorization": f"Bearer {forged}"}),
            client.get("/api/users", headers={"Authorization": f"Basic {forged}"}),
        ]

    assert {r.status_code for r in responses} == {401}
    assert all(r.get_json() == {"error": "unauthorized"} for r in responses)


def test_list_users_with_token(users_app: tuple[Flask, HmacTokenIssuer]) -> None:
    app, issuer = users_app
    token = issuer.issue(1, 60).token

    with app.test_client() as client:
        response = client.get(
            "/api/users?limit=1&page=2", headers={"Authorization": f"Bearer {token}"}
        )

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["total"] == 2
    assert payload["page"] == 2
    assert payload["limit"] == 1
    assert [u["name"] for u in payload["users"]] == ["Bob"]
    assert "password_hash" not in payload["users"][0]


def test_list_users_rejects_bad_query(users_app: tuple[Flask, HmacTokenIssuer]) -> None:
    app, issuer = users_app
    token = issuer.issue(1, 60).token

    with app.test_client() as client:
        response = client.get("/api/users?limit=0", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 422
    assert "limit" in response.get_json()["context"]["fields"]
