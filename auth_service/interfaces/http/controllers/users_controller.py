# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from auth_service.application.use_cases.users.list_users import ListUsersUseCase
from auth_service.domain.users.repositories import TokenIssuer
from auth_service.infrastructure.audit import AuditAction, audit_log
from auth_service.interfaces.http.auth_guard import require_bearer
from auth_service.interfaces.http.dto.auth import UserDTO
from auth_service.interfaces.http.dto.users import UserListDTO, UsersQueryDTO
from auth_service.shared.errors.validation import raise_validation_error
from auth_service.shared.logging import logger


class UsersController:
    def __init__(self, *, list_users: ListUsersUseCase, token_issuer: TokenIssuer) -> None:
        self._list_users = list_users
        self.token_issuer = token_issuer

    @require_bearer
    def list_users(self) -> tuple[Response, int]:
        try:
            query = UsersQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        page = self._list_users.execute(page=query.page, page_size=query.limit)

        audit_log(
            AuditAction.USERS_LISTED,
            user_id=getattr(g, "user_id", None),
            details={"page": page.page, "limit": page.page_size, "returned": len(page.users)},
        )
        logger.debug(f"users.list: page={page.page} limit={page.page_size} total={page.total}")

        payload = UserListDTO(
            users=[UserDTO.model_validate(user) for user in page.users],
            total=page.total,
            page=page.page,
            limit=page.page_size,
        ).model_dump(mode="json")
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        bp.add_url_rule("", view_func=self.list_users, methods=["GET"])
        return bp
