# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .sqlalchemy_user_repository import SqlAlchemyResetRequestRepository, SqlAlchemyUserRepository

__all__ = ["SqlAlchemyResetRequestRepository", "SqlAlchemyUserRepository"]
