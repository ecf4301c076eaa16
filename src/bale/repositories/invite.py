"""Repository for Invite entity."""

from typing import Any
from uuid import UUID

from sqlmodel import select, update

from src.bale.models import PLATFORM_INVITE_TYPE, Invite, InviteKind, InviteStatus
from src.bale.models.base import utc_now
from src.bale.repositories.base import BaseRepository


class InviteRepository(BaseRepository[Invite]):
    model = Invite

    async def get_usable(self, code: str, email: str) -> Invite | None:
        """Get the pending, unexpired platform invite for (code, email)."""
        result = await self.session.execute(
            select(Invite).where(
                Invite.code == code,
                Invite.email == email.lower(),
                Invite.invite_type == PLATFORM_INVITE_TYPE,
                Invite.kind == InviteKind.PLATFORM_INVITE.value,
                Invite.status == InviteStatus.PENDING.value,
                Invite.expires_at > utc_now(),
            )
        )
        return result.scalars().first()

    async def get_by_code(self, code: str) -> Invite | None:
        """Most recent invite carrying ``code``."""
        result = await self.session.execute(
            select(Invite)
            .where(Invite.code == code)
            .order_by(Invite.created_at.desc())  # type: ignore[attr-defined]
        )
        return result.scalars().first()

    async def code_in_use(self, code: str) -> bool:
        """True if a pending, unexpired invite already holds ``code``."""
        result = await self.session.execute(
            select(Invite.id).where(
                Invite.code == code,
                Invite.status == InviteStatus.PENDING.value,
                Invite.expires_at > utc_now(),
            )
        )
        return result.first() is not None

    async def get_pending_access_request(self, email: str) -> Invite | None:
        result = await self.session.execute(
            select(Invite).where(
                Invite.email == email.lower(),
                Invite.kind == InviteKind.ACCESS_REQUEST.value,
                Invite.status == InviteStatus.PENDING.value,
            )
        )
        return result.scalars().first()

    async def get_pending_platform_invites(self, email: str) -> list[Invite]:
        """Unexpired pending platform invites addressed to ``email``."""
        result = await self.session.execute(
            select(Invite).where(
                Invite.email == email.lower(),
                Invite.kind == InviteKind.PLATFORM_INVITE.value,
                Invite.status == InviteStatus.PENDING.value,
                Invite.expires_at > utc_now(),
            )
        )
        return list(result.scalars().all())

    async def transition_from_pending(
        self,
        invite_id: UUID,
        status: InviteStatus,
        audit: dict[str, Any],
        **values: Any,
    ) -> bool:
        """Move a pending invite to ``status`` in a single conditional write.

        Returns False when no row was pending (already terminal or missing).
        """
        stmt = (
            update(Invite)
            .where(Invite.id == invite_id)  # type: ignore[arg-type]
            .where(Invite.status == InviteStatus.PENDING.value)  # type: ignore[arg-type]
            .values(
                {
                    Invite.status: status.value,
                    Invite.audit: audit,
                    Invite.updated_at: utc_now(),
                    **{getattr(Invite, key): value for key, value in values.items()},
                }
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]

    async def get_pending_paginated(
        self,
        kind: InviteKind | None,
        cursor: str | None,
        limit: int,
    ) -> tuple[list[Invite], str | None, bool]:
        """List pending invites, optionally of one kind, newest first."""
        query = select(Invite).where(Invite.status == InviteStatus.PENDING.value)
        if kind is not None:
            query = query.where(Invite.kind == kind.value)
        return await self.paginate(query, cursor, limit, Invite.created_at)

    async def list_recent(self, limit: int = 50, status: str | None = None) -> list[Invite]:
        query = select(Invite)
        if status is not None:
            query = query.where(Invite.status == status)
        result = await self.session.execute(
            query.order_by(Invite.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())
