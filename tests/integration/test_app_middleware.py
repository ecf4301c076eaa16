"""Tests for page redirects, token refresh and response headers."""

from uuid import uuid4

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from src.bale.api.cookies import MAX_CHUNK_SIZE
from src.bale.api.middlewares import SessionMiddleware
from src.bale.core.auth_provider import AuthSession
from src.bale.core.config import get_settings
from src.bale.core.exceptions import AuthenticationRequired
from src.bale.core.security import encode_session_cookie
from tests.helpers import make_access_token, make_session, session_cookie_header

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


class TestPageRedirects:
    async def test_dashboard_without_session_redirects_to_login(self, client: AsyncClient):
        response = await client.get("/dashboard/stock")

        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    async def test_login_with_session_redirects_to_dashboard(self, client: AsyncClient):
        response = await client.get(
            "/login", headers=session_cookie_header(make_access_token())
        )

        assert response.status_code == 307
        assert response.headers["location"] == "/dashboard"

    async def test_dashboard_with_session_passes_through(self, client: AsyncClient):
        response = await client.get(
            "/dashboard", headers=session_cookie_header(make_access_token())
        )

        # No page is served here, the request simply reaches routing
        assert response.status_code == 404

    async def test_garbage_cookie_is_no_session(self, client: AsyncClient):
        name = get_settings().session_cookie_name
        response = await client.get("/dashboard", headers={"Cookie": f"{name}=base64-%%%"})

        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    async def test_api_paths_are_not_redirected(self, client: AsyncClient):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401


def _sized_session(token: str, refresh_token: str, profile_size: int) -> AuthSession:
    """A provider session padded with profile data so it spans several cookies."""
    session = make_session(token, refresh_token)
    if profile_size:
        session.user = {"user_metadata": {"bio": "x" * profile_size}}
    return session


def _chunk_cookies(session: AuthSession) -> dict[str, str]:
    """Cookies as a browser holds them after ``session`` was written in chunks."""
    name = get_settings().session_cookie_name
    value = encode_session_cookie(session.to_cookie_payload())
    parts = [value[i : i + MAX_CHUNK_SIZE] for i in range(0, len(value), MAX_CHUNK_SIZE)]
    return {f"{name}.{index}": part for index, part in enumerate(parts)}


def _apply_set_cookie(jar: dict[str, str], response) -> dict[str, str]:
    """Update a browser-like cookie jar from a response's Set-Cookie headers."""
    jar = dict(jar)
    for header in response.headers.get_list("set-cookie"):
        name, _, value = header.split(";", 1)[0].partition("=")
        if "Max-Age=0" in header:
            jar.pop(name, None)
        else:
            jar[name] = value
    return jar


def _cookie_header(jar: dict[str, str]) -> dict[str, str]:
    return {"Cookie": "; ".join(f"{name}={value}" for name, value in jar.items())}


class RefreshingProvider:
    def __init__(self, succeed: bool, profile_size: int = 0):
        self.succeed = succeed
        self.profile_size = profile_size
        self.refreshed: list[str] = []

    async def refresh_session(self, refresh_token: str):
        self.refreshed.append(refresh_token)
        if not self.succeed:
            raise AuthenticationRequired("Invalid or expired credentials")
        return _sized_session(
            make_access_token(sub="refreshed-identity"), "rotated-refresh", self.profile_size
        )


def _session_app(provider: RefreshingProvider) -> FastAPI:
    app = FastAPI()
    app.add_middleware(SessionMiddleware, provider_factory=lambda: provider)

    @app.get("/dashboard")
    async def dashboard(request: Request) -> dict:
        return {"refreshed": getattr(request.state, "access_token", None) is not None}

    return app


class TestSessionRefresh:
    async def test_expired_token_is_refreshed_and_written_back(self):
        provider = RefreshingProvider(succeed=True)
        expired = make_access_token(expires_in=-60)

        async with AsyncClient(
            transport=ASGITransport(app=_session_app(provider)), base_url="http://test"
        ) as client:
            response = await client.get(
                "/dashboard", headers=session_cookie_header(expired, "old-refresh")
            )

        assert response.status_code == 200
        assert response.json() == {"refreshed": True}
        assert provider.refreshed == ["old-refresh"]
        name = get_settings().session_cookie_name
        assert any(h.startswith(f"{name}=") for h in response.headers.get_list("set-cookie"))

    async def test_failed_refresh_redirects_to_login(self):
        provider = RefreshingProvider(succeed=False)
        expired = make_access_token(expires_in=-60)

        async with AsyncClient(
            transport=ASGITransport(app=_session_app(provider)), base_url="http://test"
        ) as client:
            response = await client.get(
                "/dashboard", headers=session_cookie_header(expired, "old-refresh")
            )

        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    async def test_expired_token_without_refresh_token(self):
        provider = RefreshingProvider(succeed=True)
        expired = make_access_token(expires_in=-60)

        async with AsyncClient(
            transport=ASGITransport(app=_session_app(provider)), base_url="http://test"
        ) as client:
            response = await client.get("/dashboard", headers=session_cookie_header(expired))

        assert response.status_code == 307
        assert provider.refreshed == []

    async def test_single_cookie_replaced_by_chunks_is_expired(self):
        provider = RefreshingProvider(succeed=True, profile_size=3000)
        name = get_settings().session_cookie_name
        old = make_session(make_access_token(expires_in=-60), "old-refresh")
        jar = {name: encode_session_cookie(old.to_cookie_payload())}

        async with AsyncClient(
            transport=ASGITransport(app=_session_app(provider)), base_url="http://test"
        ) as client:
            first = await client.get("/dashboard", headers=_cookie_header(jar))
            jar = _apply_set_cookie(jar, first)
            client.cookies.clear()
            second = await client.get("/dashboard", headers=_cookie_header(jar))

        assert first.json() == {"refreshed": True}
        assert sorted(jar) == [f"{name}.0", f"{name}.1"]
        assert second.status_code == 200
        assert second.json() == {"refreshed": False}
        assert provider.refreshed == ["old-refresh"]

    async def test_dropped_chunk_is_expired(self):
        provider = RefreshingProvider(succeed=True, profile_size=3000)
        name = get_settings().session_cookie_name
        old = _sized_session(make_access_token(expires_in=-60), "old-refresh", 6000)
        jar = _chunk_cookies(old)
        assert len(jar) == 3

        async with AsyncClient(
            transport=ASGITransport(app=_session_app(provider)), base_url="http://test"
        ) as client:
            first = await client.get("/dashboard", headers=_cookie_header(jar))
            jar = _apply_set_cookie(jar, first)
            client.cookies.clear()
            second = await client.get("/dashboard", headers=_cookie_header(jar))

        assert first.json() == {"refreshed": True}
        assert sorted(jar) == [f"{name}.0", f"{name}.1"]
        assert second.json() == {"refreshed": False}
        assert provider.refreshed == ["old-refresh"]


class TestResponseHeaders:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "healthy"}

    async def test_security_headers(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "frame-ancestors 'none'" in response.headers["Content-Security-Policy"]

    async def test_auth_responses_are_not_cached(self, client: AsyncClient):
        response = await client.post("/api/auth/logout")

        assert response.headers["Cache-Control"] == "no-store, no-cache, must-revalidate"

    async def test_request_id_is_propagated(self, client: AsyncClient):
        request_id = str(uuid4())

        response = await client.post(
            "/api/create-invite", json={}, headers={"X-Request-ID": request_id}
        )

        assert response.headers["X-Request-ID"] == request_id
        assert response.json()["request_id"] == request_id

    async def test_cors_preflight_for_allowed_origin(self, client: AsyncClient):
        response = await client.options(
            "/api/validate-invite",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
