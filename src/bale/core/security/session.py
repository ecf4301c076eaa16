"""Session token handling for the hosted auth provider.

The provider signs access tokens with a shared HS256 secret. Browsers carry
them in ``sb-<project>-auth-token`` cookies, either as the raw JWT or as
``base64-`` + base64url(JSON session), optionally split across ``.0``,
``.1``... chunk cookies. API clients may send ``Authorization: Bearer``.
"""

import base64
import binascii
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from jose import JWTError, jwt

from src.bale.core.config import get_settings

BASE64_PREFIX = "base64-"
_COOKIE_MARKERS = ("auth-token", "access-token")


@dataclass(frozen=True)
class Identity:
    """An authenticated external identity. Never owned by this service."""

    id: str
    email: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


def is_session_cookie(name: str) -> bool:
    """Cheap name-pattern check, does not look at the value."""
    prefix = get_settings().session_cookie_prefix
    return name.startswith(prefix) and any(marker in name for marker in _COOKIE_MARKERS)


def has_session_cookie(cookie_names: Iterable[str]) -> bool:
    return any(is_session_cookie(name) for name in cookie_names)


def decode_session_token(token: str) -> dict[str, Any] | None:
    """Decode and validate a provider access token. Returns None on any error."""
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
        )
    except JWTError:
        return None


def identity_from_token(token: str | None) -> Identity | None:
    """Resolve an identity from an access token. Pure, no I/O and no caching."""
    if not token:
        return None
    claims = decode_session_token(token)
    if claims is None or not claims.get("sub"):
        return None
    metadata = claims.get("user_metadata")
    return Identity(
        id=str(claims["sub"]),
        email=(claims.get("email") or "").lower() or None,
        metadata=metadata if isinstance(metadata, dict) else {},
    )


def decode_session_cookie(value: str) -> dict[str, Any] | None:
    """Parse a session cookie value into the provider session payload."""
    if value.startswith(BASE64_PREFIX):
        encoded = value[len(BASE64_PREFIX) :]
        try:
            value = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)).decode()
        except (binascii.Error, UnicodeDecodeError):
            return None

    try:
        payload = json.loads(value)
    except ValueError:
        # Bare JWT
        return {"access_token": value} if value.count(".") == 2 else None

    if isinstance(payload, dict):
        return payload
    # Older clients stored [access_token, refresh_token, ...]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        refresh = payload[1] if len(payload) > 1 and isinstance(payload[1], str) else None
        return {"access_token": payload[0], "refresh_token": refresh}
    return None


def encode_session_cookie(session: Mapping[str, Any]) -> str:
    """Serialize a provider session the way browser clients store it."""
    raw = json.dumps(dict(session), separators=(",", ":")).encode()
    return BASE64_PREFIX + base64.urlsafe_b64encode(raw).decode().rstrip("=")


def _joined_cookie_values(cookies: Mapping[str, str]) -> list[str]:
    """Cookie values with chunked cookies (name.0, name.1, ...) reassembled.

    The configured cookie name comes first. Chunks are joined from ``.0``
    up to the first missing index.
    """
    whole: dict[str, str] = {}
    chunks: dict[str, dict[int, str]] = {}
    for name, value in cookies.items():
        if not is_session_cookie(name):
            continue
        base, _, suffix = name.rpartition(".")
        if base and suffix.isdigit():
            chunks.setdefault(base, {})[int(suffix)] = value
        else:
            whole[name] = value

    candidates: list[tuple[str, str]] = list(whole.items())
    for base, parts in chunks.items():
        joined: list[str] = []
        while len(joined) in parts:
            joined.append(parts[len(joined)])
        if joined:
            candidates.append((base, "".join(joined)))

    preferred = get_settings().session_cookie_name
    # Stable sort keeps whole cookies ahead of chunks for the same name
    candidates.sort(key=lambda candidate: candidate[0] != preferred)
    return [value for _, value in candidates]


def extract_session(
    cookies: Mapping[str, str], authorization: str | None = None
) -> dict[str, Any] | None:
    """Find the provider session on a request: bearer header first, then cookies."""
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
        if token:
            return {"access_token": token}

    for value in _joined_cookie_values(cookies):
        session = decode_session_cookie(value)
        if session and session.get("access_token"):
            return session
    return None


def extract_session_token(
    cookies: Mapping[str, str], authorization: str | None = None
) -> str | None:
    session = extract_session(cookies, authorization)
    return session.get("access_token") if session else None
