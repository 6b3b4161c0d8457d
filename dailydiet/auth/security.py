# -*- coding: utf-8 -*-
"""Auth — password hashing + JWT + FastAPI helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Request

from ..errors import TOKEN_COOKIE_NAME, InvalidToken, Unauthorized
from ..users.storage import UserStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Password hashing (stdlib pbkdf2_hmac).
_PBKDF2_ALG = "sha256"
DEFAULT_PBKDF2_ITERATIONS = 200_000


class PasswordHasher:
    """PBKDF2 hashing; the iteration count is the work factor."""

    def __init__(self, iterations: int = DEFAULT_PBKDF2_ITERATIONS) -> None:
        self.iterations = int(iterations)

    def hash(self, password: str) -> str:
        salt = os.urandom(16)
        dk = hashlib.pbkdf2_hmac(_PBKDF2_ALG, password.encode("utf-8"), salt, self.iterations)
        return f"pbkdf2_{_PBKDF2_ALG}${self.iterations}${_b64url_encode(salt)}${_b64url_encode(dk)}"

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            scheme, iter_s, salt_b64, dk_b64 = password_hash.split("$", 3)
        except ValueError:
            return False
        if not scheme.startswith("pbkdf2_"):
            return False
        try:
            alg = scheme.split("_", 1)[1]
            iterations = int(iter_s)
            salt = _b64url_decode(salt_b64)
            expected = _b64url_decode(dk_b64)
            actual = hashlib.pbkdf2_hmac(alg, password.encode("utf-8"), salt, iterations)
        except (ValueError, TypeError):
            return False
        return hmac.compare_digest(actual, expected)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenError(Exception):
    """Raised when a session token cannot be trusted."""


class TokenSigner:
    """Stateless HS256 session tokens carrying the user id as ``sub``.

    ``clock`` is injectable so expiry can be exercised without sleeping.
    """

    def __init__(self, secret: str, ttl_seconds: int, clock: Optional[Clock] = None) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self.secret = secret
        self.ttl_seconds = int(ttl_seconds)
        self.clock: Clock = clock or _utc_now

    def sign(self, subject: str, **claims: Any) -> str:
        now = self.clock()
        exp = now + timedelta(seconds=self.ttl_seconds)
        payload = dict(claims)
        payload.update(
            {
                "sub": subject,
                "iat": int(now.timestamp()),
                "exp": int(exp.timestamp()),
            }
        )
        return _jwt_encode(payload, self.secret)

    def verify(self, token: str) -> Dict[str, Any]:
        try:
            payload = _jwt_decode(token, self.secret)
        except (ValueError, UnicodeError) as exc:
            raise TokenError(str(exc)) from exc
        try:
            exp = int(payload.get("exp") or 0)
        except (TypeError, ValueError) as exc:
            raise TokenError("bad exp claim") from exc
        if not exp or exp <= int(self.clock().timestamp()):
            raise TokenError("token expired")
        if not isinstance(payload.get("sub"), str) or not payload["sub"]:
            raise TokenError("missing subject")
        return payload


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))


def _jwt_encode(payload: Dict[str, Any], secret: str) -> str:
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64url_encode(json.dumps(header, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    sig_b64 = _b64url_encode(sig)
    return f"{header_b64}.{payload_b64}.{sig_b64}"


def _jwt_decode(token: str, secret: str) -> Dict[str, Any]:
    parts = token.split(".")
    if len(parts) != 3:
        raise ValueError("invalid token")
    header_b64, payload_b64, sig_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    expected_sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    actual_sig = _b64url_decode(sig_b64)
    if not hmac.compare_digest(expected_sig, actual_sig):
        raise ValueError("bad signature")
    header = json.loads(_b64url_decode(header_b64).decode("utf-8"))
    if not isinstance(header, dict) or header.get("alg") != "HS256":
        raise ValueError("unsupported algorithm")
    payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("bad payload")
    return payload


@dataclass(frozen=True)
class Principal:
    """Authenticated identity. Only ``get_principal`` creates these."""

    id: str


def authenticate_credentials(
    users: UserStore, hasher: PasswordHasher, email: str, password: str
) -> Optional[Dict[str, Any]]:
    """Return the user row when email/password match, else None.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    user = users.find_by_email(email)
    if not user:
        return None
    if not hasher.verify(password, user["password"]):
        return None
    return user


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_principal(request: Request, signer: TokenSigner = Depends(get_token_signer)) -> Principal:
    # Reuse the principal if another dependency already resolved it.
    principal = getattr(request.state, "principal", None)
    if principal is not None:
        return principal

    token = request.cookies.get(TOKEN_COOKIE_NAME)
    if not token:
        raise Unauthorized("Token is missing")

    try:
        payload = signer.verify(token)
    except TokenError as exc:
        logger.info("Rejected session token on %s: %s", request.url.path, exc)
        raise InvalidToken("JWT token is invalid") from exc

    principal = Principal(id=payload["sub"])
    request.state.principal = principal
    return principal
