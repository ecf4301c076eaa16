"""Session token helpers for tests."""

import time
from typing import Any
from uuid import uuid4

from jose import jwt

from src.bale.core.auth_provider import AuthSession
from src.bale.core.config import get_settings
from src.bale.core.security import encode_session_cookie


def make_access_token(
    sub: str | None = None,
    email: str | None = "someone@example.com",
    metadata: dict[str, Any] | None = None,
    expires_in: int = 3600,
    secret: str | None = None,
    audience: str = "authenticated",
) -> str:
    """Sign a token the way the hosted provider does."""
    now = int(time.time())
    claims: dict[str, Any] = {
        "sub": sub or str(uuid4()),
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "role": "authenticated",
        "user_metadata": metadata or {},
    }
    if email is not None:
        claims["email"] = email
    return jwt.encode(claims, secret or get_settings().auth_jwt_secret, algorithm="HS256")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def make_session(token: str, refresh_token: str | None = "refresh-token") -> AuthSession:
    return AuthSession(access_token=token, refresh_token=refresh_token, expires_in=3600)


def session_cookie_header(token: str, refresh_token: str | None = None) -> dict[str, str]:
    """Cookie header carrying a browser-style ``base64-`` session cookie."""
    value = encode_session_cookie({"access_token": token, "refresh_token": refresh_token})
    return {"Cookie": f"{get_settings().session_cookie_name}={value}"}


def auth_headers(user: Any) -> dict[str, str]:
    """Bearer header for a user record's linked identity."""
    return bearer(make_access_token(sub=user.auth_user_id, email=user.email))
