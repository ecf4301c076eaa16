"""Upgrade request registry - demo users asking for a full account."""

import asyncio
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bale.core.exceptions import (
    BaleError,
    InvalidState,
    NotFound,
    UpstreamFailure,
    ValidationError,
)
from src.bale.core.logging import get_logger
from src.bale.core.notifications import send_upgrade_approved_email
from src.bale.models import (
    Company,
    UpgradeRequest,
    UpgradeRequestStatus,
    User,
    UserRole,
    Warehouse,
)
from src.bale.models.base import utc_now
from src.bale.repositories import UpgradeRequestRepository, UserRepository
from src.bale.services.authorization import CallerContext
from src.bale.services.bootstrap_service import (
    TenantBootstrapService,
    is_shared_demo_identity,
    split_name,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class UpgradeApproval:
    request: UpgradeRequest
    company: Company
    warehouse: Warehouse
    user: User | None  # None until a shared-demo requester logs in


class UpgradeRequestService:
    """Submit, approve and reject upgrade requests."""

    def __init__(
        self,
        upgrade_repo: UpgradeRequestRepository,
        user_repo: UserRepository,
        bootstrap: TenantBootstrapService,
        session: AsyncSession,
    ):
        self.upgrade_repo = upgrade_repo
        self.user_repo = user_repo
        self.bootstrap = bootstrap
        self.session = session

    async def _get_pending(self, request_id: UUID) -> UpgradeRequest:
        request = await self.upgrade_repo.get_by_id(request_id)
        if request is None:
            raise NotFound("Upgrade request not found")
        if request.status != UpgradeRequestStatus.PENDING.value:
            raise InvalidState(f"Request has already been {request.status}")
        return request

    async def _transition(
        self, request: UpgradeRequest, status: UpgradeRequestStatus, **values: object
    ) -> None:
        if not await self.upgrade_repo.transition_from_pending(request.id, status, **values):
            await self.session.rollback()
            await self.session.refresh(request)
            raise InvalidState(f"Request has already been {request.status}")

    async def submit_request(
        self,
        caller: CallerContext,
        name: str,
        email: str,
        phone: str | None = None,
        company: str | None = None,
        message: str | None = None,
    ) -> UpgradeRequest:
        """Store a pending request.

        Demo users share a login, so duplicates are detected by the
        submitted email rather than by identity.
        """
        if caller.has_full_access:
            raise ValidationError("Your account already has full access")

        email = email.strip().lower()
        try:
            previous = await self.upgrade_repo.get_latest_by_email(email)
            if previous is not None and previous.status == UpgradeRequestStatus.PENDING.value:
                raise ValidationError("Your upgrade request is pending admin approval")
            if previous is not None and previous.status == UpgradeRequestStatus.APPROVED.value:
                raise ValidationError(
                    "Your upgrade has been approved! Log out, then log in using "
                    f"{previous.email} to use your full account."
                )

            request = UpgradeRequest(
                auth_user_id=caller.identity.id,
                email=email,
                name=name,
                phone=phone or None,
                company=company or None,
                message=message or None,
                from_shared_demo=is_shared_demo_identity(caller.identity),
            )
            self.upgrade_repo.add(request)
            await self.session.commit()
            await self.session.refresh(request)
        except BaleError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamFailure(f"Failed to store upgrade request: {e}") from e

        logger.info(
            "Upgrade requested",
            request_id=str(request.id),
            resubmission=previous is not None,
        )
        return request

    async def reject_request(
        self, request_id: UUID, reason: str | None, admin: User
    ) -> UpgradeRequest:
        """pending -> rejected, recording who and why."""
        try:
            request = await self._get_pending(request_id)
            now = utc_now()
            await self._transition(
                request,
                UpgradeRequestStatus.REJECTED,
                rejected_at=now,
                rejected_by=admin.id,
                rejection_reason=reason or None,
            )
            await self.session.commit()
            await self.session.refresh(request)
        except BaleError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamFailure(f"Failed to reject upgrade request: {e}") from e

        logger.info(
            "Upgrade request rejected",
            request_id=str(request_id),
            admin_id=str(admin.id),
        )
        return request

    async def approve_request(self, request_id: UUID, admin: User) -> UpgradeApproval:
        """Claim the request and provision its company in one transaction.

        A requester with a personal identity is linked right away. A request
        made from the shared demo login is linked by Tenant Bootstrap on the
        requester's next login with the requested email.
        """
        try:
            request = await self._get_pending(request_id)

            existing: User | None = None
            if not request.from_shared_demo:
                existing = await self.user_repo.get_by_auth_user_id(request.auth_user_id)
                if existing is not None and not existing.is_demo:
                    raise InvalidState("User already has full access")

            company, warehouse = await self.bootstrap.provision_company(
                request.company or f"{request.name}'s Company",
                created_by=request.auth_user_id,
            )

            user: User | None = None
            if not request.from_shared_demo:
                user = self._link_user(request, existing, company)
                await self.session.flush()

            now = utc_now()
            await self._transition(
                request,
                UpgradeRequestStatus.APPROVED,
                approved_at=now,
                approved_by=admin.id,
                company_id=company.id,
                user_id=user.id if user else None,
            )
            await self.session.commit()
            await self.session.refresh(request)
        except BaleError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamFailure(f"Failed to approve upgrade request: {e}") from e

        await asyncio.to_thread(
            send_upgrade_approved_email, request.email, request.name, company.name
        )
        logger.info(
            "Upgrade request approved",
            request_id=str(request_id),
            company_id=str(company.id),
            linked=user is not None,
            admin_id=str(admin.id),
        )
        return UpgradeApproval(request=request, company=company, warehouse=warehouse, user=user)

    def _link_user(
        self, request: UpgradeRequest, existing: User | None, company: Company
    ) -> User:
        """Promote a demo user record, or create one, as admin of ``company``."""
        name = split_name(request.name)
        user = existing or User(auth_user_id=request.auth_user_id, company_id=company.id)
        user.company_id = company.id
        user.email = request.email
        user.first_name = name.first
        user.last_name = name.last
        user.phone_number = request.phone
        user.role = UserRole.ADMIN.value
        user.is_demo = False
        user.updated_at = utc_now()
        self.user_repo.add(user)
        return user

    async def list_pending(
        self, cursor: str | None, limit: int
    ) -> tuple[list[UpgradeRequest], str | None, bool]:
        return await self.upgrade_repo.get_pending_paginated(cursor, limit)
