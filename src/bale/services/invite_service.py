"""Invite registry: platform invites and access requests."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from urllib.parse import quote
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bale.core.config import get_settings
from src.bale.core.exceptions import (
    BaleError,
    InvalidState,
    NotFound,
    UpstreamFailure,
    ValidationError,
)
from src.bale.core.logging import get_logger
from src.bale.core.notifications import send_platform_invite_email
from src.bale.core.security import generate_api_code, generate_direct_code, is_api_code
from src.bale.models import Invite, InviteKind, InviteStatus, User
from src.bale.models.base import utc_now
from src.bale.repositories import InviteRepository

logger = get_logger(__name__)


def build_magic_link(origin: str, code: str, email: str) -> str:
    """``{origin}/signup?invite={code}&email={encoded email}``"""
    # Same reserved set as JavaScript's encodeURIComponent
    encoded_email = quote(email, safe="!~*'()")
    return f"{origin.rstrip('/')}/signup?invite={quote(code, safe='')}&email={encoded_email}"


@dataclass(frozen=True)
class InviteValidation:
    valid: bool
    invite: Invite | None = None
    error: str | None = None


class InviteService:
    """Creates, validates and decides invites. Commits its own transactions."""

    def __init__(self, invite_repo: InviteRepository, session: AsyncSession):
        self.invite_repo = invite_repo
        self.session = session

    async def _unused_code(self, generate: Callable[[], str] = generate_api_code) -> str:
        """Draw codes until one is not held by another usable invite."""
        settings = get_settings()
        for _ in range(settings.invite_code_max_attempts):
            code = generate()
            if not await self.invite_repo.code_in_use(code):
                return code
        raise UpstreamFailure(
            f"No free invite code after {settings.invite_code_max_attempts} attempts"
        )

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamFailure(f"Failed to {action}: {e}") from e

    async def create_invite(
        self,
        email: str,
        invited_by: str | None,
        origin: str,
        send_email: bool = True,
    ) -> tuple[Invite, str]:
        """Create a pending platform invite.

        Returns (invite, magic_link).
        """
        settings = get_settings()
        email = email.strip().lower()
        try:
            code = await self._unused_code()
            invite = Invite(
                code=code,
                email=email,
                kind=InviteKind.PLATFORM_INVITE.value,
                status=InviteStatus.PENDING.value,
                expires_at=utc_now() + timedelta(days=settings.invite_expire_days),
                invited_by=invited_by,
            )
            self.invite_repo.add(invite)
            await self._commit("create invite")
            await self.session.refresh(invite)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamFailure(f"Failed to create invite: {e}") from e

        magic_link = build_magic_link(origin, invite.code, invite.email)
        if send_email:
            await asyncio.to_thread(
                send_platform_invite_email, invite.email, invite.code, magic_link, invite.expires_at
            )

        logger.info("Invite created", invite_id=str(invite.id), invited_by=invited_by)
        return invite, magic_link

    async def issue_direct_invite(self, email: str, invited_by: str | None = None) -> Invite:
        """Operator path: twelve-character hex code, shorter expiry, no email."""
        settings = get_settings()
        code = await self._unused_code(generate_direct_code)
        invite = Invite(
            code=code,
            email=email.strip().lower(),
            kind=InviteKind.PLATFORM_INVITE.value,
            expires_at=utc_now() + timedelta(hours=settings.invite_direct_expire_hours),
            invited_by=invited_by,
            audit={"generation_method": "direct"},
        )
        self.invite_repo.add(invite)
        await self._commit("create invite")
        await self.session.refresh(invite)
        logger.info("Direct invite created", invite_id=str(invite.id))
        return invite

    async def validate_invite(self, code: str | None, email: str | None) -> InviteValidation:
        """Check a (code, email) pair. Semantic failures come back as valid=False."""
        if not code or not email:
            return InviteValidation(valid=False, error="Invite code and email are required")
        if not is_api_code(code):
            return InviteValidation(valid=False, error="Invalid invite code format")

        try:
            invite = await self.invite_repo.get_usable(code, email.strip())
        except SQLAlchemyError as e:
            raise UpstreamFailure(f"Failed to validate invite: {e}") from e

        if invite is None:
            return InviteValidation(valid=False, error="Invalid or expired invite code")
        return InviteValidation(valid=True, invite=invite)

    async def _get_pending(self, invite_id: UUID) -> Invite:
        invite = await self.invite_repo.get_by_id(invite_id)
        if invite is None:
            raise NotFound("Invite request not found")
        if invite.status != InviteStatus.PENDING.value:
            raise InvalidState(f"Request is already {invite.status}")
        return invite

    async def _transition(
        self, invite: Invite, status: InviteStatus, audit: dict[str, object]
    ) -> None:
        """Conditional pending -> status write. Losing a race is InvalidState."""
        if not await self.invite_repo.transition_from_pending(invite.id, status, audit):
            await self.session.rollback()
            await self.session.refresh(invite)
            raise InvalidState(f"Request is already {invite.status}")

    async def reject_invite(self, invite_id: UUID, admin: User) -> Invite:
        """Revoke a pending invite, keeping its existing metadata."""
        try:
            invite = await self._get_pending(invite_id)
            audit = {
                **invite.audit,
                "rejected_at": utc_now().isoformat(),
                "rejected_by": admin.auth_user_id,
            }
            await self._transition(invite, InviteStatus.REVOKED, audit)
            await self._commit("reject invite")
            await self.session.refresh(invite)
        except BaleError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamFailure(f"Failed to reject invite: {e}") from e

        logger.info("Invite rejected", invite_id=str(invite_id), admin_id=str(admin.id))
        return invite

    async def request_access(
        self,
        email: str,
        name: str,
        company: str | None = None,
        phone: str | None = None,
        message: str | None = None,
    ) -> Invite:
        """Self-service access request, decided later by an admin."""
        settings = get_settings()
        email = email.strip().lower()
        try:
            if await self.invite_repo.get_pending_access_request(email) is not None:
                raise ValidationError("An access request for this email is already pending")

            request = Invite(
                code=await self._unused_code(),
                email=email,
                kind=InviteKind.ACCESS_REQUEST.value,
                expires_at=utc_now() + timedelta(days=settings.invite_expire_days),
                requester_name=name,
                requester_company=company or None,
                requester_phone=phone or None,
                message=message or None,
                audit={"request_type": InviteKind.ACCESS_REQUEST.value},
            )
            self.invite_repo.add(request)
            await self._commit("store access request")
            await self.session.refresh(request)
        except BaleError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamFailure(f"Failed to store access request: {e}") from e

        logger.info("Access request received", invite_id=str(request.id))
        return request

    async def approve_access_request(
        self, invite_id: UUID, admin: User, origin: str
    ) -> tuple[Invite, Invite, str]:
        """Approve a pending access request and issue the platform invite it asked for.

        Returns (access_request, platform_invite, magic_link).
        """
        settings = get_settings()
        try:
            request = await self._get_pending(invite_id)
            if request.kind != InviteKind.ACCESS_REQUEST.value:
                raise InvalidState("Only access requests can be approved")

            grant = Invite(
                code=await self._unused_code(),
                email=request.email,
                kind=InviteKind.PLATFORM_INVITE.value,
                expires_at=utc_now() + timedelta(days=settings.invite_expire_days),
                invited_by=admin.auth_user_id,
                audit={"source_request_id": str(request.id)},
            )
            self.invite_repo.add(grant)
            await self.session.flush()

            audit = {
                **request.audit,
                "approved_at": utc_now().isoformat(),
                "approved_by": admin.auth_user_id,
                "granted_invite_id": str(grant.id),
            }
            await self._transition(request, InviteStatus.APPROVED, audit)
            await self._commit("approve access request")
            await self.session.refresh(request)
            await self.session.refresh(grant)
        except BaleError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamFailure(f"Failed to approve access request: {e}") from e

        magic_link = build_magic_link(origin, grant.code, grant.email)
        await asyncio.to_thread(
            send_platform_invite_email, grant.email, grant.code, magic_link, grant.expires_at
        )
        logger.info(
            "Access request approved",
            invite_id=str(request.id),
            granted_invite_id=str(grant.id),
            admin_id=str(admin.id),
        )
        return request, grant, magic_link

    async def list_pending(
        self, kind: InviteKind | None, cursor: str | None, limit: int
    ) -> tuple[list[Invite], str | None, bool]:
        return await self.invite_repo.get_pending_paginated(kind, cursor, limit)

    async def revoke_by_code(self, code: str, revoked_by: str) -> Invite:
        """Operator revoke. Same conditional transition as reject."""
        invite = await self.invite_repo.get_by_code(code)
        if invite is None:
            raise NotFound(f"No invite with code {code}")
        if invite.status != InviteStatus.PENDING.value:
            raise InvalidState(f"Request is already {invite.status}")
        audit = {**invite.audit, "revoked_at": utc_now().isoformat(), "revoked_by": revoked_by}
        await self._transition(invite, InviteStatus.REVOKED, audit)
        await self._commit("revoke invite")
        await self.session.refresh(invite)
        return invite
