"""OAuth and magic-link landing page.

Page-level failures redirect to ``/login?error=<reason>`` instead of
rendering an error body.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import RedirectResponse
from starlette.requests import Request

from src.bale.api.cookies import set_session_cookies
from src.bale.api.dependencies import AuthProviderDep, BootstrapServiceDep
from src.bale.api.origin import safe_next_path
from src.bale.core.exceptions import AuthenticationRequired, UpstreamFailure
from src.bale.core.logging import get_logger
from src.bale.core.security import identity_from_token
from src.bale.services.bootstrap_service import is_shared_demo_identity

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _login_error(reason: str) -> RedirectResponse:
    return RedirectResponse(f"/login?error={reason}", status_code=303)


@router.get("/callback", include_in_schema=False)
async def auth_callback(
    request: Request,
    provider: AuthProviderDep,
    bootstrap: BootstrapServiceDep,
    code: str | None = None,
    next_path: Annotated[str | None, Query(alias="next")] = None,
) -> RedirectResponse:
    if not code:
        return _login_error("no_code_provided")

    try:
        try:
            session = await provider.exchange_code_for_session(code)
        except (AuthenticationRequired, UpstreamFailure) as e:
            logger.warning("Code exchange failed", error=str(e))
            return _login_error("authentication_failed")

        identity = identity_from_token(session.access_token)
        if identity is None:
            logger.warning("Code exchange returned no usable user")
            return _login_error("missing_user")

        if not is_shared_demo_identity(identity):
            result = await bootstrap.setup_new_user(identity)
            if not result.success and not result.already_exists:
                logger.error("Tenant setup failed", identity_id=identity.id, error=result.error)
                return _login_error("setup_failed")
    except Exception:
        logger.exception("Auth callback failed")
        return _login_error("unexpected_error")

    response = RedirectResponse(safe_next_path(next_path), status_code=303)
    set_session_cookies(response, session, request)
    return response
