# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from auth_service.domain.users.entities import UserPage
from auth_service.domain.users.repositories import UserRepository

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class ListUsersUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self._users = users
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    def execute(self, page: int = 1, page_size: int | None = None) -> UserPage:
        page = max(1, int(page))
        size = self._default_page_size if page_size is None else int(page_size)
        size = min(max(1, size), self._max_page_size)

        users, total = self._users.list(page, size)
        return UserPage(
            users=[user.to_public() for user in users],
            total=total,
            page=page,
            page_size=size,
        )


__all__ = ["DEFAULT_PAGE_SIZE", "ListUsersUseCase", "MAX_PAGE_SIZE"]
