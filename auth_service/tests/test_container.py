from __future__ import annotations

import pytest
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from auth_service.app import create_app
from auth_service.infrastructure.container import Container
from auth_service.infrastructure.db import ENGINE, SessionLocal, build_engine
from auth_service.infrastructure.db.models import User
from auth_service.infrastructure.mail.notifier import LoggingResetNotifier, OutboxResetNotifier
from auth_service.shared.config.settings import DatabaseConfig


def test_injected_notifier_is_kept_even_when_empty() -> None:
    outbox = OutboxResetNotifier(max_size=10)
    assert len(outbox) == 0

    container = Container(notifier=outbox)

    assert container.notifier is outbox
    assert container.reset_token_service._notifier is outbox


def test_default_notifier_logs() -> None:
    assert isinstance(Container().notifier, LoggingResetNotifier)


def test_default_container_uses_module_engine() -> None:
    container = Container()

    assert container.engine is ENGINE
    assert container.session_factory is SessionLocal


def test_list_users_store_cap_follows_config() -> None:
    container = Container()

    assert container.user_repository._max_page_size == container.config.pagination.max_page_size


@pytest.fixture()
def engine(tmp_path):
    engine = build_engine(DatabaseConfig(url=f"sqlite:///{tmp_path / 'injected.db'}"))
    yield engine
    engine.dispose()


def test_create_app_builds_schema_on_injected_engine(engine) -> None:
    assert not inspect(engine).has_table("users")
    container = Container(engine=engine, notifier=OutboxResetNotifier(max_size=10))

    app = create_app(container)

    assert inspect(engine).has_table("users")
    assert inspect(engine).has_table("password_reset_requests")

    with app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={
                "name": "Ann",
                "email": "ann@x.com",
                "password": "secret123",
                "password_confirmation": "secret123",
            },
        )
    container.password_hasher.shutdown()
    container.session_factory.remove()

    assert response.status_code == 201
    with Session(engine) as session:
        assert [u.email for u in session.query(User).all()] == ["ann@x.com"]
