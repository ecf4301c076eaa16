"""Edge session handling for page routes.

Only requests that carry a provider session cookie are resolved at all. An
expired access token is refreshed once and the new session written back.
"""

from collections.abc import Callable

from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.bale.api.cookies import set_session_cookies
from src.bale.core.auth_provider import AuthProviderClient, AuthSession
from src.bale.core.exceptions import AuthenticationRequired, UpstreamFailure
from src.bale.core.logging import get_logger
from src.bale.core.security import (
    Identity,
    extract_session,
    has_session_cookie,
    identity_from_token,
)

logger = get_logger(__name__)

PROTECTED_PREFIXES = ("/dashboard",)
AUTH_PAGES = ("/login", "/signup")


class SessionMiddleware(BaseHTTPMiddleware):
    """Redirect between login and dashboard pages based on the session cookie."""

    def __init__(
        self,
        app: ASGIApp,
        provider_factory: Callable[[], AuthProviderClient] = AuthProviderClient,
    ):
        super().__init__(app)
        self.provider_factory = provider_factory

    async def _refresh(self, refresh_token: str) -> AuthSession | None:
        try:
            return await self.provider_factory().refresh_session(refresh_token)
        except (AuthenticationRequired, UpstreamFailure) as e:
            logger.info("Session refresh failed", error=str(e))
            return None

    async def _resolve(self, request: Request) -> tuple[Identity | None, AuthSession | None]:
        if not has_session_cookie(request.cookies.keys()):
            return None, None

        session = extract_session(request.cookies)
        if session is None:
            return None, None

        identity = identity_from_token(session.get("access_token"))
        if identity is not None or not session.get("refresh_token"):
            return identity, None

        refreshed = await self._refresh(session["refresh_token"])
        if refreshed is None:
            return None, None
        return identity_from_token(refreshed.access_token), refreshed

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        identity, refreshed = await self._resolve(request)
        if refreshed is not None:
            # Picked up by the authorization gate for this request
            request.state.access_token = refreshed.access_token

        path = request.url.path
        response: Response
        if identity is None and path.startswith(PROTECTED_PREFIXES):
            response = RedirectResponse("/login", status_code=307)
        elif identity is not None and path in AUTH_PAGES:
            response = RedirectResponse("/dashboard", status_code=307)
        else:
            response = await call_next(request)

        if refreshed is not None:
            set_session_cookies(response, refreshed, request)
        return response
