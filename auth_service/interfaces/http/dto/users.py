# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from auth_service.interfaces.http.dto.auth import UserDTO


class UsersQueryDTO(BaseModel):
    # upper bound is enforced by ListUsersUseCase clamping
    limit: int | None = Field(None, ge=1)
    page: int = Field(1, ge=1)


class UserListDTO(BaseModel):
    users: list[UserDTO]
    total: int
    page: int
    limit: int

    model_config = ConfigDict(from_attributes=True)
