# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth import RegisteredDTO, StatusDTO, TokenDTO, UserDTO
from .users import UserListDTO, UsersQueryDTO

__all__ = [
    "RegisteredDTO",
    "StatusDTO",
    "TokenDTO",
    "UserDTO",
    "UserListDTO",
    "UsersQueryDTO",
]
