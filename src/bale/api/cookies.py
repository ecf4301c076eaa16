"""Writing and clearing provider session cookies."""

from starlette.requests import Request
from starlette.responses import Response

from src.bale.core.auth_provider import AuthSession
from src.bale.core.config import get_settings
from src.bale.core.security import encode_session_cookie, is_session_cookie

# Browsers drop cookies over ~4KB; longer sessions are split into name.0, name.1, ...
MAX_CHUNK_SIZE = 3180
COOKIE_MAX_AGE = 60 * 60 * 24 * 400


def _expire(response: Response, name: str) -> None:
    response.delete_cookie(
        name,
        path="/",
        secure=get_settings().session_cookie_secure,
        samesite="lax",
    )


def set_session_cookies(response: Response, session: AuthSession, request: Request) -> None:
    """Write ``session`` and expire every other session cookie the request carried.

    A single cookie replaced by chunks (or three chunks replaced by two) would
    otherwise leave the old names behind to be read on the next request.
    """
    settings = get_settings()
    name = settings.session_cookie_name
    value = encode_session_cookie(session.to_cookie_payload())
    chunks = [value[i : i + MAX_CHUNK_SIZE] for i in range(0, len(value), MAX_CHUNK_SIZE)]

    names = [name] if len(chunks) == 1 else [f"{name}.{index}" for index in range(len(chunks))]
    for cookie_name, chunk in zip(names, chunks, strict=True):
        response.set_cookie(
            cookie_name,
            chunk,
            max_age=COOKIE_MAX_AGE,
            path="/",
            secure=settings.session_cookie_secure,
            httponly=False,  # browser client reads the session too
            samesite="lax",
        )

    for stale in sorted(n for n in request.cookies if is_session_cookie(n) and n not in names):
        _expire(response, stale)


def clear_session_cookies(request: Request, response: Response) -> None:
    """Expire every session cookie the request carried, chunks included."""
    names = {name for name in request.cookies if is_session_cookie(name)}
    names.add(get_settings().session_cookie_name)
    for name in sorted(names):
        _expire(response, name)
