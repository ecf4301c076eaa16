"""Security utilities - session tokens, invite codes, response headers."""

from src.bale.core.security.codes import (
    generate_api_code,
    generate_direct_code,
    is_api_code,
    is_direct_code,
)
from src.bale.core.security.headers import SecurityHeadersMiddleware
from src.bale.core.security.session import (
    Identity,
    decode_session_cookie,
    decode_session_token,
    encode_session_cookie,
    extract_session,
    extract_session_token,
    has_session_cookie,
    identity_from_token,
    is_session_cookie,
)

__all__ = [
    # Codes
    "generate_api_code",
    "generate_direct_code",
    "is_api_code",
    "is_direct_code",
    # Headers
    "SecurityHeadersMiddleware",
    # Session
    "Identity",
    "decode_session_cookie",
    "decode_session_token",
    "encode_session_cookie",
    "extract_session",
    "extract_session_token",
    "has_session_cookie",
    "identity_from_token",
    "is_session_cookie",
]
