"""Session endpoints backed by the hosted auth provider."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from starlette.requests import Request

from src.bale.api.cookies import clear_session_cookies, set_session_cookies
from src.bale.api.dependencies import (
    AccountServiceDep,
    AuthenticatedCaller,
    AuthProviderDep,
    BootstrapServiceDep,
    CurrentIdentity,
)
from src.bale.core.config import get_settings
from src.bale.core.exceptions import AuthenticationRequired, UpstreamFailure
from src.bale.core.logging import get_logger
from src.bale.core.rate_limit import limiter
from src.bale.core.security import extract_session_token, identity_from_token
from src.bale.schemas import (
    ActionResponse,
    BootstrapResult,
    CallerRead,
    DemoAccountRequest,
    DemoAccountResponse,
    OtpRequest,
    OtpVerifyRequest,
    SessionResponse,
)
from src.bale.services.bootstrap_service import is_shared_demo_identity

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
account_router = APIRouter(tags=["auth"])

DASHBOARD_PATH = "/dashboard"


@router.post(
    "/setup",
    response_model=BootstrapResult,
    response_model_exclude_none=True,
    summary="Provision tenant",
    description="First-login provisioning of company, admin user record and warehouse.",
)
async def setup(identity: CurrentIdentity, bootstrap: BootstrapServiceDep) -> BootstrapResult:
    if identity is None:
        raise AuthenticationRequired()
    return await bootstrap.setup_new_user(identity)


@router.post(
    "/otp",
    response_model=ActionResponse,
    summary="Send one-time code",
)
@limiter.limit("5/minute")
async def send_otp(
    request: Request, otp_data: OtpRequest, provider: AuthProviderDep
) -> ActionResponse:
    await provider.send_otp(otp_data.email.lower())
    return ActionResponse(message="Check your email for a sign-in code")


@router.post(
    "/verify-otp",
    response_model=SessionResponse,
    summary="Verify one-time code",
    description="Exchange an emailed code for a session and provision the tenant if needed.",
)
@limiter.limit("10/minute")
async def verify_otp(
    request: Request,
    otp_data: OtpVerifyRequest,
    provider: AuthProviderDep,
    bootstrap: BootstrapServiceDep,
) -> JSONResponse:
    session = await provider.verify_otp(otp_data.email.lower(), otp_data.token)
    identity = identity_from_token(session.access_token)
    if identity is None:
        raise UpstreamFailure("Provider issued a session token that does not verify")

    if not is_shared_demo_identity(identity):
        result = await bootstrap.setup_new_user(identity)
        if not result.success and not result.already_exists:
            raise UpstreamFailure(f"Tenant bootstrap failed: {result.error}")

    response = JSONResponse(SessionResponse(redirect_to=DASHBOARD_PATH).model_dump(by_alias=True))
    set_session_cookies(response, session, request)
    return response


@router.post(
    "/demo-login",
    response_model=SessionResponse,
    summary="Sign in to the demo",
)
@limiter.limit("10/minute")
async def demo_login(request: Request, provider: AuthProviderDep) -> JSONResponse:
    settings = get_settings()
    session = await provider.sign_in_with_password(settings.demo_email, settings.demo_password)
    logger.info("Demo login")

    response = JSONResponse(SessionResponse(redirect_to=DASHBOARD_PATH).model_dump(by_alias=True))
    set_session_cookies(response, session, request)
    return response


@router.post(
    "/logout",
    response_model=ActionResponse,
    summary="Sign out",
)
async def logout(request: Request, provider: AuthProviderDep) -> JSONResponse:
    token = extract_session_token(request.cookies, request.headers.get("authorization"))
    if token:
        await provider.sign_out(token)

    response = JSONResponse(ActionResponse(message="Signed out").model_dump(by_alias=True))
    clear_session_cookies(request, response)
    return response


@router.get(
    "/me",
    response_model=CallerRead,
    summary="Current caller",
    description="Identity, user record and effective tenant (the demo tenant in demo mode).",
)
async def me(caller: AuthenticatedCaller, account_service: AccountServiceDep) -> CallerRead:
    return await account_service.describe(caller)


@account_router.post(
    "/create-demo-account",
    response_model=DemoAccountResponse,
    summary="Check account access",
    description="Confirm the body names the signed-in identity and report full or demo access.",
)
async def create_demo_account(
    account_data: DemoAccountRequest,
    caller: AuthenticatedCaller,
    account_service: AccountServiceDep,
) -> DemoAccountResponse:
    return account_service.check_demo_account(caller, account_data.user_id, account_data.email)
