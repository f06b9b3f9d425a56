# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from auth_service.domain.users.entities import ResetRequest as DomainResetRequest
from auth_service.domain.users.entities import User as DomainUser
from auth_service.domain.users.entities import normalize_email
from auth_service.domain.users.exceptions import (
    ResetTokenConsumedError,
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from auth_service.domain.users.repositories import ResetRequestRepository, UserRepository
from auth_service.infrastructure.db.models import PasswordResetRequest, User
from auth_service.infrastructure.db.session import SessionFactory, session_scope
from auth_service.shared.logging import logger

MAX_PAGE_SIZE = 100


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _user_to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        created_at=_aware(row.created_at),
    )


def _reset_to_domain(row: PasswordResetRequest) -> DomainResetRequest:
    return DomainResetRequest(
        id=row.id,
        user_id=row.user_id,
        token_hash=row.token_hash,
        created_at=_aware(row.created_at),
        expires_at=_aware(row.expires_at),
        consumed_at=_aware(row.consumed_at) if row.consumed_at else None,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        *,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self._session_factory = session_factory
        self._max_page_size = max(1, int(max_page_size))

    def create(self, name: str, email: str, password_hash: str) -> DomainUser:
        try:
            with session_scope(self._session_factory) as session:
                row = User(
                    name=name,
                    email=normalize_email(email),
                    password_hash=password_hash,
                    created_at=datetime.now(UTC),
                )
                session.add(row)
                session.flush()
                return _user_to_domain(row)
        except IntegrityError as exc:
            logger.info("users.create: email already registered")
            raise UserAlreadyExistsError() from exc

    def find_by_email(self, email: str) -> DomainUser:
        with session_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == normalize_email(email)).first()
            if not row:
                raise UserNotFoundError()
            return _user_to_domain(row)

    def find_by_id(self, user_id: int) -> DomainUser:
        with session_scope(self._session_factory) as session:
            row = session.query(User).filter(User.id == user_id).first()
            if not row:
                raise UserNotFoundError(context={"user_id": user_id})
            return _user_to_domain(row)

    def list(self, page: int, page_size: int) -> tuple[list[DomainUser], int]:
        page = max(1, int(page))
        page_size = min(max(1, int(page_size)), self._max_page_size)
        with session_scope(self._session_factory) as session:
            total = session.query(func.count(User.id)).scalar() or 0
            rows = (
                session.query(User)
                .order_by(User.id.asc())
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            )
            return [_user_to_domain(row) for row in rows], int(total)


class SqlAlchemyResetRequestRepository(ResetRequestRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory

    def replace_for_user(
        self, user_id: int, token_hash: str, created_at: datetime, expires_at: datetime
    ) -> DomainResetRequest:
        with session_scope(self._session_factory) as session:
            session.query(PasswordResetRequest).filter(
                PasswordResetRequest.user_id == user_id
            ).delete(synchronize_session=False)
            row = PasswordResetRequest(
                user_id=user_id,
                token_hash=token_hash,
                created_at=created_at,
                expires_at=expires_at,
            )
            session.add(row)
            session.flush()
            return _reset_to_domain(row)

    def latest_for_user(self, user_id: int) -> DomainResetRequest | None:
        with session_scope(self._session_factory) as session:
            row = (
                session.query(PasswordResetRequest)
                .filter(PasswordResetRequest.user_id == user_id)
                .order_by(PasswordResetRequest.created_at.desc(), PasswordResetRequest.id.desc())
                .first()
            )
            return _reset_to_domain(row) if row else None

    def consume(self, token_hash: str, password_hash: str, now: datetime) -> int:
        with session_scope(self._session_factory) as session:
            row = (
                session.query(PasswordResetRequest)
                .filter(PasswordResetRequest.token_hash == token_hash)
                .with_for_update()
                .first()
            )
            if row is None:
                raise ResetTokenNotFoundError()
            if row.consumed_at is not None:
                raise ResetTokenConsumedError()
            if now >= _aware(row.expires_at):
                raise ResetTokenExpiredError()

            # conditional write: a concurrent consumer that got here first leaves 0 rows
            claimed = (
                session.query(PasswordResetRequest)
                .filter(
                    PasswordResetRequest.id == row.id,
                    PasswordResetRequest.consumed_at.is_(None),
                )
                .update({"consumed_at": now}, synchronize_session=False)
            )
            if claimed != 1:
                raise ResetTokenConsumedError()

            updated = (
                session.query(User)
                .filter(User.id == row.user_id)
                .update(
                    {"password_hash": password_hash, "updated_at": now},
                    synchronize_session=False,
                )
            )
            if not updated:
                raise UserNotFoundError(context={"user_id": row.user_id})
            return row.user_id
