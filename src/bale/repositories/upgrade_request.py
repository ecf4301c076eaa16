"""Repository for UpgradeRequest entity."""

from typing import Any
from uuid import UUID

from sqlmodel import select, update

from src.bale.models import UpgradeRequest, UpgradeRequestStatus
from src.bale.models.base import utc_now
from src.bale.repositories.base import BaseRepository


class UpgradeRequestRepository(BaseRepository[UpgradeRequest]):
    model = UpgradeRequest

    async def get_latest_by_email(self, email: str) -> UpgradeRequest | None:
        result = await self.session.execute(
            select(UpgradeRequest)
            .where(UpgradeRequest.email == email.lower())
            .order_by(UpgradeRequest.created_at.desc())  # type: ignore[attr-defined]
        )
        return result.scalars().first()

    async def transition_from_pending(
        self,
        request_id: UUID,
        status: UpgradeRequestStatus,
        **values: Any,
    ) -> bool:
        """Conditionally move a pending request to ``status``.

        Returns False when the request was not pending at write time.
        """
        pending = UpgradeRequestStatus.PENDING.value
        stmt = (
            update(UpgradeRequest)
            .where(UpgradeRequest.id == request_id)  # type: ignore[arg-type]
            .where(UpgradeRequest.status == pending)  # type: ignore[arg-type]
            .values(status=status.value, updated_at=utc_now(), **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]

    async def get_pending_paginated(
        self, cursor: str | None, limit: int
    ) -> tuple[list[UpgradeRequest], str | None, bool]:
        query = select(UpgradeRequest).where(
            UpgradeRequest.status == UpgradeRequestStatus.PENDING.value
        )
        return await self.paginate(query, cursor, limit, UpgradeRequest.created_at)
