# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine

from auth_service.application.services.password_hashing import WerkzeugPasswordHasher
from auth_service.application.services.reset_tokens import ResetTokenService
from auth_service.application.services.token_issuer import HmacTokenIssuer
from auth_service.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from auth_service.application.use_cases.users.list_users import ListUsersUseCase
from auth_service.application.use_cases.users.login_user import LoginUserUseCase
from auth_service.application.use_cases.users.register_user import RegisterUserUseCase
from auth_service.application.use_cases.users.reset_password import ResetPasswordUseCase
from auth_service.domain.users.repositories import ResetNotifier
from auth_service.infrastructure.auth.login_attempts import LoginAttemptsTracker
from auth_service.infrastructure.db.session import (
    ENGINE,
    SessionFactory,
    SessionLocal,
    build_session_factory,
)
from auth_service.infrastructure.mail.notifier import LoggingResetNotifier
from auth_service.infrastructure.repositories.users import (
    SqlAlchemyResetRequestRepository,
    SqlAlchemyUserRepository,
)
from auth_service.interfaces.http.controllers.auth_controller import AuthController
from auth_service.interfaces.http.controllers.users_controller import UsersController
from auth_service.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        engine: Engine | None = None,
        notifier: ResetNotifier | None = None,
    ) -> None:
        self.config = config or load_config()
        self._engine = engine
        self._notifier = notifier

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        passwords = self.config.passwords
        return WerkzeugPasswordHasher(
            method=passwords.hash_method,
            timeout=passwords.hash_timeout,
            max_workers=passwords.hash_workers,
        )

    @cached_property
    def token_issuer(self) -> HmacTokenIssuer:
        return HmacTokenIssuer(self.config.secret_key)

    @cached_property
    def engine(self) -> Engine:
        return self._engine if self._engine is not None else ENGINE

    @cached_property
    def session_factory(self) -> SessionFactory:
        if self._engine is None:
            return SessionLocal
        return build_session_factory(self._engine)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(
            self.session_factory,
            max_page_size=self.config.pagination.max_page_size,
        )

    @cached_property
    def reset_request_repository(self) -> SqlAlchemyResetRequestRepository:
        return SqlAlchemyResetRequestRepository(self.session_factory)

    @cached_property
    def notifier(self) -> ResetNotifier:
        return self._notifier if self._notifier is not None else LoggingResetNotifier()

    @cached_property
    def login_attempts(self) -> LoginAttemptsTracker:
        security = self.config.security
        return LoginAttemptsTracker(
            max_attempts=security.login_max_attempts,
            lockout_duration=security.login_lockout_seconds,
            attempt_window=security.login_attempt_window,
        )

    @cached_property
    def reset_token_service(self) -> ResetTokenService:
        return ResetTokenService(
            users=self.user_repository,
            resets=self.reset_request_repository,
            password_hasher=self.password_hasher,
            notifier=self.notifier,
            ttl=timedelta(minutes=self.config.reset.ttl_minutes),
            throttle_seconds=self.config.reset.throttle_seconds,
        )

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            password_min_length=self.config.passwords.min_length,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_issuer,
            attempts=self.login_attempts,
            token_ttl_seconds=self.config.tokens.ttl_seconds,
        )

    @cached_property
    def forgot_password_use_case(self) -> ForgotPasswordUseCase:
        return ForgotPasswordUseCase(resets=self.reset_token_service)

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            resets=self.reset_token_service,
            users=self.user_repository,
            attempts=self.login_attempts,
            password_min_length=self.config.passwords.min_length,
        )

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        pagination = self.config.pagination
        return ListUsersUseCase(
            users=self.user_repository,
            default_page_size=pagination.default_page_size,
            max_page_size=pagination.max_page_size,
        )

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            forgot_password_use_case=self.forgot_password_use_case,
            reset_password_use_case=self.reset_password_use_case,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            list_users=self.list_users_use_case,
            token_issuer=self.token_issuer,
        )
