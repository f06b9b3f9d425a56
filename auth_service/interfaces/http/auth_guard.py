# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from auth_service.domain.users.exceptions import TokenExpiredError, TokenVerificationError
from auth_service.domain.users.repositories import TokenIssuer
from auth_service.shared.errors import AuthenticationRequiredError
from auth_service.shared.logging import logger


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def authenticate(issuer: TokenIssuer) -> int:
    """Return the user id carried by the request's bearer token.

    Missing, malformed, forged and expired tokens all end in the same
    AuthenticationRequiredError so the response never says which it was.
    """
    token = _bearer_token()
    if token is None:
        logger.info(f"auth.guard: missing bearer token on {request.method} {request.path}")
        raise AuthenticationRequiredError()

    try:
        user_id = issuer.verify(token)
    except TokenExpiredError as exc:
        logger.info(f"auth.guard: expired token on {request.method} {request.path}")
        raise AuthenticationRequiredError() from exc
    except TokenVerificationError as exc:
        logger.warning(f"auth.guard: rejected token on {request.method} {request.path}")
        raise AuthenticationRequiredError() from exc

    g.user_id = user_id
    return user_id


def require_bearer(func: Callable[..., Any]) -> Callable[..., Any]:
    """Guard a controller method; the controller must expose ``token_issuer``."""

    @wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        authenticate(self.token_issuer)
        return func(self, *args, **kwargs)

    return wrapper


__all__ = ["authenticate", "require_bearer"]
