"""Upgrade requests from demo-mode callers."""

from fastapi import APIRouter
from starlette.requests import Request

from src.bale.api.dependencies import AuthenticatedCaller, UpgradeServiceDep
from src.bale.core.rate_limit import limiter
from src.bale.schemas import ActionResponse, UpgradeRequestCreate

router = APIRouter(tags=["upgrades"])


@router.post(
    "/request-invite",
    response_model=ActionResponse,
    summary="Request a full account",
    description="Ask a platform admin to provision a company for a demo user.",
)
@limiter.limit("5/hour")
async def request_invite(
    request: Request,
    upgrade_data: UpgradeRequestCreate,
    caller: AuthenticatedCaller,
    upgrade_service: UpgradeServiceDep,
) -> ActionResponse:
    await upgrade_service.submit_request(
        caller,
        name=upgrade_data.name,
        email=upgrade_data.email,
        phone=upgrade_data.phone,
        company=upgrade_data.company,
        message=upgrade_data.message,
    )
    return ActionResponse(message="Upgrade request submitted. We'll be in touch soon.")
