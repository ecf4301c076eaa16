"""Invite endpoints: create, validate and self-service access requests."""

from typing import Any

from fastapi import APIRouter
from starlette.requests import Request

from src.bale.api.dependencies import AuthenticatedCaller, InviteServiceDep
from src.bale.api.origin import request_origin
from src.bale.core.logging import get_logger
from src.bale.core.rate_limit import limiter
from src.bale.schemas import (
    AccessRequestCreate,
    ActionResponse,
    InviteCreateRequest,
    InviteCreateResponse,
    InviteLink,
    InviteSummary,
    InviteValidateRequest,
    InviteValidateResponse,
)

logger = get_logger(__name__)

router = APIRouter(tags=["invites"])


@router.post(
    "/create-invite",
    response_model=InviteCreateResponse,
    summary="Create platform invite",
    description="Issue a four-digit invite code for an email and send the signup link.",
)
async def create_invite(
    request: Request,
    invite_data: InviteCreateRequest,
    caller: AuthenticatedCaller,
    invite_service: InviteServiceDep,
) -> InviteCreateResponse:
    invite, magic_link = await invite_service.create_invite(
        email=invite_data.email,
        invited_by=caller.identity.id,
        origin=request_origin(request),
    )
    return InviteCreateResponse(
        invite=InviteLink(
            email=invite.email,
            code=invite.code,
            magic_link=magic_link,
            expires_at=invite.expires_at,
        )
    )


@router.post(
    "/validate-invite",
    response_model=InviteValidateResponse,
    response_model_exclude_none=True,
    summary="Validate invite code",
    description=(
        "Check a code and email pair. Always answers 200; an unusable invite "
        "comes back as valid=false with an error message."
    ),
)
@limiter.limit("10/minute")
async def validate_invite(
    request: Request, invite_service: InviteServiceDep
) -> InviteValidateResponse:
    # Body parsed by hand so malformed input is a semantic failure, not a 400
    try:
        payload: Any = await request.json()
    except ValueError:
        payload = None
    body = InviteValidateRequest.model_validate(payload if isinstance(payload, dict) else {})

    result = await invite_service.validate_invite(body.code, body.email)
    if not result.valid or result.invite is None:
        return InviteValidateResponse(valid=False, error=result.error)

    logger.info("Invite validated", invite_id=str(result.invite.id))
    return InviteValidateResponse(
        valid=True,
        invite=InviteSummary.model_validate(result.invite),
    )


@router.post(
    "/request-access",
    response_model=ActionResponse,
    summary="Request platform access",
    description="Public form. An admin approves or rejects the request later.",
)
@limiter.limit("3/hour")
async def request_access(
    request: Request,
    access_data: AccessRequestCreate,
    invite_service: InviteServiceDep,
) -> ActionResponse:
    await invite_service.request_access(
        email=access_data.email,
        name=access_data.name,
        company=access_data.company,
        phone=access_data.phone,
        message=access_data.message,
    )
    return ActionResponse(message="Access request submitted")
