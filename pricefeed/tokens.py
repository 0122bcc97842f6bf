"""Signed access tokens for the administrative API."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union

import jwt

TOKEN_EXPIRE = timedelta(hours=2)
ISSUER = "get-price"
_ALGORITHMS = ["HS256", "HS384", "HS512"]

Secret = Union[str, bytes]


@dataclass(frozen=True)
class AdminClaims:
    """Claims carried by an administrator token."""

    username: str
    expires_at: Optional[int] = None
    issuer: Optional[str] = None


class InvalidTokenError(ValueError):
    """Raised when a token cannot be verified."""


def generate_token(username: str, secret: Secret) -> str:
    """Return an HS256 token for the user, valid for TOKEN_EXPIRE."""
    payload = {
        "username": username,
        "exp": int(time.time()) + int(TOKEN_EXPIRE.total_seconds()),
        "iss": ISSUER,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def parse_token(token: str, secret: Secret) -> AdminClaims:
    """Verify a token and return its claims."""
    try:
        payload = jwt.decode(
            token, secret, algorithms=_ALGORITHMS, options={"verify_aud": False}
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    username = payload.get("username", "")
    if not isinstance(username, str):
        raise InvalidTokenError("invalid token")
    expires_at = payload.get("exp")
    return AdminClaims(
        username=username,
        expires_at=int(expires_at) if expires_at is not None else None,
        issuer=payload.get("iss"),
    )