"""
Signed bearer tokens.

Tokens use the compact JWS layout ``header.payload.signature``, each part
base64url-encoded without padding, signed with HMAC-SHA256 over
``header.payload``. The signature is checked before anything in the
payload is trusted; expiry is checked last.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import math
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from auth_service.domain.users.entities import AccessToken
from auth_service.domain.users.exceptions import TokenExpiredError, TokenInvalidError
from auth_service.domain.users.repositories import TokenIssuer

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _dumps(data: dict[str, Any]) -> bytes:
    return json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")


class HmacTokenIssuer(TokenIssuer):
    def __init__(
        self,
        secret_key: str,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._key = secret_key.encode("utf-8")
        self._clock = clock
        self._header_segment = _b64encode(_dumps(_HEADER))

    def issue(self, subject_id: int, ttl_seconds: int) -> AccessToken:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        now = self._clock()
        # exp rounds up: a token lives for at least ttl_seconds
        expires_at = math.ceil(now + ttl_seconds)
        payload = {"sub": str(subject_id), "iat": int(now), "exp": expires_at}

        signing_input = f"{self._header_segment}.{_b64encode(_dumps(payload))}"
        token = f"{signing_input}.{_b64encode(self._sign(signing_input))}"
        return AccessToken(
            subject=subject_id,
            token=token,
            issued_at=datetime.fromtimestamp(now, UTC),
            expires_at=datetime.fromtimestamp(expires_at, UTC),
        )

    def verify(self, token: str) -> int:
        payload = self._verified_payload(token)
        try:
            subject = int(payload["sub"])
            expires_at = float(payload["exp"])
        except (KeyError, TypeError, ValueError) as exc:
            raise TokenInvalidError() from exc

        if self._clock() >= expires_at:
            raise TokenExpiredError()
        return subject

    def _verified_payload(self, token: str) -> dict[str, Any]:
        if not isinstance(token, str):
            raise TokenInvalidError()
        parts = token.split(".")
        if len(parts) != 3:
            raise TokenInvalidError()
        header_segment, payload_segment, signature_segment = parts

        try:
            signature = _b64decode(signature_segment)
        except (binascii.Error, ValueError) as exc:
            raise TokenInvalidError() from exc
        expected = self._sign(f"{header_segment}.{payload_segment}")
        if not hmac.compare_digest(signature, expected):
            raise TokenInvalidError()

        try:
            header = json.loads(_b64decode(header_segment))
            payload = json.loads(_b64decode(payload_segment))
        except (binascii.Error, ValueError) as exc:
            raise TokenInvalidError() from exc
        if not isinstance(header, dict) or header.get("alg") != _HEADER["alg"]:
            raise TokenInvalidError()
        if not isinstance(payload, dict):
            raise TokenInvalidError()
        return payload

    def _sign(self, signing_input: str) -> bytes:
        return hmac.new(self._key, signing_input.encode("utf-8"), hashlib.sha256).digest()
