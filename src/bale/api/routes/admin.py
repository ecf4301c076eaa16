"""Admin endpoints for deciding invites and upgrade requests.

Invite decisions need a tenant admin. Upgrade decisions provision whole
companies and need a platform super admin.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from starlette.requests import Request

from src.bale.api.dependencies import (
    AdminUser,
    InviteServiceDep,
    SuperAdmin,
    UpgradeServiceDep,
)
from src.bale.api.origin import request_origin
from src.bale.models import InviteKind
from src.bale.schemas import (
    ActionResponse,
    ApproveInviteResponse,
    ApproveUpgradeResponse,
    InviteRead,
    PaginatedResponse,
    RejectUpgradeBody,
    RequestIdBody,
    UpgradeRequestRead,
    invite_read_adapter,
)

router = APIRouter(prefix="/admin", tags=["admin"])

PageLimit = Annotated[int, Query(ge=1, le=100)]


@router.get(
    "/invites",
    response_model=PaginatedResponse[InviteRead],
    summary="List pending invites",
    description="Pending platform invites and access requests, newest first.",
)
async def list_invites(
    admin: AdminUser,
    invite_service: InviteServiceDep,
    kind: InviteKind | None = None,
    cursor: str | None = None,
    limit: PageLimit = 50,
) -> PaginatedResponse[InviteRead]:
    invites, next_cursor, has_more = await invite_service.list_pending(kind, cursor, limit)
    return PaginatedResponse[InviteRead](
        items=[
            invite_read_adapter.validate_python(invite, from_attributes=True)
            for invite in invites
        ],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "/reject-invite",
    response_model=ActionResponse,
    summary="Reject invite",
    description="Revoke a pending invite or access request.",
)
async def reject_invite(
    body: RequestIdBody,
    admin: AdminUser,
    invite_service: InviteServiceDep,
) -> ActionResponse:
    await invite_service.reject_invite(body.request_id, admin)
    return ActionResponse(message="Invite request rejected")


@router.post(
    "/approve-invite",
    response_model=ApproveInviteResponse,
    summary="Approve access request",
    description="Approve a pending access request and email the requester a platform invite.",
)
async def approve_invite(
    request: Request,
    body: RequestIdBody,
    admin: AdminUser,
    invite_service: InviteServiceDep,
) -> ApproveInviteResponse:
    _, grant, magic_link = await invite_service.approve_access_request(
        body.request_id, admin, origin=request_origin(request)
    )
    return ApproveInviteResponse(
        message="Invite request approved and email sent",
        invite_id=grant.id,
        invite_code=grant.code,
        invite_link=magic_link,
    )


@router.get(
    "/upgrade-requests",
    response_model=PaginatedResponse[UpgradeRequestRead],
    summary="List pending upgrade requests",
)
async def list_upgrade_requests(
    admin: SuperAdmin,
    upgrade_service: UpgradeServiceDep,
    cursor: str | None = None,
    limit: PageLimit = 50,
) -> PaginatedResponse[UpgradeRequestRead]:
    requests, next_cursor, has_more = await upgrade_service.list_pending(cursor, limit)
    return PaginatedResponse[UpgradeRequestRead](
        items=[UpgradeRequestRead.model_validate(r) for r in requests],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "/reject-upgrade",
    response_model=ActionResponse,
    summary="Reject upgrade request",
)
async def reject_upgrade(
    body: RejectUpgradeBody,
    admin: SuperAdmin,
    upgrade_service: UpgradeServiceDep,
) -> ActionResponse:
    await upgrade_service.reject_request(body.request_id, body.reason, admin)
    return ActionResponse(message="Upgrade request rejected")


@router.post(
    "/approve-upgrade",
    response_model=ApproveUpgradeResponse,
    summary="Approve upgrade request",
    description="Provision the requester's company, admin user record and default warehouse.",
)
async def approve_upgrade(
    body: RequestIdBody,
    admin: SuperAdmin,
    upgrade_service: UpgradeServiceDep,
) -> ApproveUpgradeResponse:
    approval = await upgrade_service.approve_request(body.request_id, admin)
    return ApproveUpgradeResponse(
        message="Upgrade request approved",
        company_id=approval.company.id,
        warehouse_id=approval.warehouse.id,
        user_id=approval.user.id if approval.user else None,
    )
