"""Client for the hosted authentication provider (GoTrue-compatible REST API).

Passwords, OTP delivery and OAuth live entirely at the provider. This client
only exchanges credentials for sessions.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx

from src.bale.core.config import get_settings
from src.bale.core.exceptions import AuthenticationRequired, UpstreamFailure
from src.bale.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AuthSession:
    """Session issued by the provider."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str = "bearer"
    user: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "AuthSession":
        if not data.get("access_token"):
            raise UpstreamFailure("Auth provider response did not include an access token")
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            token_type=data.get("token_type", "bearer"),
            user=data.get("user") or {},
        )

    def to_cookie_payload(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "token_type": self.token_type,
            "user": self.user,
        }


class AuthProviderClient:
    """Thin async wrapper over the provider's token, OTP and verify endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.auth_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.auth_anon_key
        self.timeout = timeout or settings.auth_request_timeout_seconds
        self._transport = transport

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
        bearer: str | None = None,
    ) -> dict[str, Any]:
        headers = {"apikey": self.api_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(path, json=payload, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"Auth provider unreachable: {e}") from e

        if response.status_code in (400, 401, 403, 422):
            logger.info(
                "Auth provider rejected request",
                path=path,
                status_code=response.status_code,
            )
            raise AuthenticationRequired("Invalid or expired credentials")
        if response.is_error:
            raise UpstreamFailure(
                f"Auth provider returned {response.status_code} for {path}: {response.text}"
            )
        if not response.content:
            return {}
        return response.json()  # type: ignore[no-any-return]

    async def exchange_code_for_session(
        self, code: str, code_verifier: str | None = None
    ) -> AuthSession:
        """Exchange an OAuth / magic-link authorization code (PKCE) for a session."""
        data = await self._post(
            "/token",
            {"auth_code": code, "code_verifier": code_verifier},
            params={"grant_type": "pkce"},
        )
        return AuthSession.from_payload(data)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = await self._post(
            "/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        return AuthSession.from_payload(data)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        data = await self._post(
            "/token",
            {"refresh_token": refresh_token},
            params={"grant_type": "refresh_token"},
        )
        return AuthSession.from_payload(data)

    async def send_otp(self, email: str, create_user: bool = True) -> None:
        """Ask the provider to email a one-time code."""
        await self._post("/otp", {"email": email, "create_user": create_user})

    async def verify_otp(self, email: str, token: str) -> AuthSession:
        data = await self._post("/verify", {"type": "email", "email": email, "token": token})
        return AuthSession.from_payload(data)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session at the provider. Failures are logged, not raised."""
        try:
            await self._post("/logout", {}, bearer=access_token)
        except (AuthenticationRequired, UpstreamFailure) as e:
            logger.warning("Provider sign-out failed", error=str(e))
