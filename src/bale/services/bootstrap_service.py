"""Tenant bootstrap - first-login provisioning of company, user and warehouse."""

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bale.core.config import get_settings
from src.bale.core.logging import get_logger
from src.bale.core.security import Identity
from src.bale.models import (
    DEFAULT_WAREHOUSE_NAME,
    Company,
    InviteStatus,
    UpgradeRequestStatus,
    User,
    UserRole,
    Warehouse,
)
from src.bale.models.base import utc_now
from src.bale.repositories import (
    InviteRepository,
    UpgradeRequestRepository,
    UserRepository,
)
from src.bale.schemas.auth import BootstrapResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class DisplayName:
    first: str
    last: str

    @property
    def company_name(self) -> str:
        return f"{self.first}'s Company"


def derive_display_name(identity: Identity) -> DisplayName:
    """Name from provider metadata, falling back to the email local part."""
    metadata = identity.metadata
    given = (metadata.get("given_name") or "").strip()
    family = (metadata.get("family_name") or "").strip()
    if given:
        return DisplayName(first=given, last=family)

    full = (metadata.get("full_name") or metadata.get("name") or "").strip()
    if not full and identity.email:
        full = identity.email.split("@")[0]
    parts = full.split()
    if not parts:
        return DisplayName(first="User", last="")
    return DisplayName(first=parts[0], last=" ".join(parts[1:]))


def split_name(name: str) -> DisplayName:
    parts = name.strip().split()
    return DisplayName(first=parts[0] if parts else "User", last=" ".join(parts[1:]))


def is_shared_demo_identity(identity: Identity) -> bool:
    """The shared demo credential never gets a user record of its own."""
    return bool(identity.email) and identity.email == get_settings().demo_email.lower()


class TenantBootstrapService:
    """Creates company, admin user record and default warehouse exactly once."""

    def __init__(
        self,
        user_repo: UserRepository,
        invite_repo: InviteRepository,
        upgrade_repo: UpgradeRequestRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.invite_repo = invite_repo
        self.upgrade_repo = upgrade_repo
        self.session = session

    async def provision_company(
        self, company_name: str, created_by: str | None
    ) -> tuple[Company, Warehouse]:
        """Stage a company and its default warehouse. Flushes, does not commit."""
        company = Company(name=company_name, is_demo=False)
        self.session.add(company)
        await self.session.flush()

        warehouse = Warehouse(
            company_id=company.id,
            name=DEFAULT_WAREHOUSE_NAME,
            created_by=created_by,
        )
        self.session.add(warehouse)
        await self.session.flush()
        return company, warehouse

    async def setup_new_user(self, identity: Identity) -> BootstrapResult:
        """Idempotent first-login provisioning.

        Returns ``success=False, already_exists=True`` when the identity is
        already linked, including when a concurrent call won the race.
        """
        existing = await self.user_repo.get_by_auth_user_id(identity.id)
        if existing is not None:
            return BootstrapResult(success=False, already_exists=True, user_id=existing.id)

        if is_shared_demo_identity(identity):
            return BootstrapResult(success=False, error="Demo accounts are not provisioned")

        name = derive_display_name(identity)
        email = (identity.email or "").lower()

        try:
            warehouse: Warehouse | None = None
            approved = await self.upgrade_repo.get_latest_by_email(email) if email else None
            if (
                approved is not None
                and approved.status == UpgradeRequestStatus.APPROVED.value
                and approved.company_id is not None
                and approved.user_id is None
            ):
                # Upgrade approved from the shared demo login: join the company made for it
                company_id = approved.company_id
                name = split_name(approved.name)
            else:
                approved = None
                company, warehouse = await self.provision_company(name.company_name, identity.id)
                company_id = company.id

            user = User(
                company_id=company_id,
                auth_user_id=identity.id,
                email=email,
                first_name=name.first,
                last_name=name.last,
                phone_number=approved.phone if approved else None,
                role=UserRole.ADMIN.value,
                is_demo=False,
            )
            self.user_repo.add(user)
            await self.session.flush()

            if approved is not None:
                approved.user_id = user.id
                approved.updated_at = utc_now()
                self.session.add(approved)

            await self._consume_platform_invites(email, identity.id)
            await self.session.commit()
        except IntegrityError:
            # Unique auth_user_id: another first login for this identity got there first
            await self.session.rollback()
            logger.info("Bootstrap lost race, user already provisioned", identity_id=identity.id)
            return BootstrapResult(success=False, already_exists=True)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Tenant bootstrap failed", identity_id=identity.id, error=str(e))
            return BootstrapResult(success=False, error="Failed to set up account")

        logger.info(
            "Tenant bootstrapped",
            identity_id=identity.id,
            user_id=str(user.id),
            company_id=str(company_id),
            joined_upgrade=approved is not None,
        )
        return BootstrapResult(
            success=True,
            company_id=company_id,
            user_id=user.id,
            warehouse_id=warehouse.id if warehouse else None,
        )

    async def _consume_platform_invites(self, email: str, identity_id: str) -> None:
        """Signing up spends any pending platform invite addressed to this email."""
        if not email:
            return
        for invite in await self.invite_repo.get_pending_platform_invites(email):
            audit = {
                **invite.audit,
                "consumed_at": utc_now().isoformat(),
                "consumed_by": identity_id,
            }
            await self.invite_repo.transition_from_pending(
                invite.id, InviteStatus.APPROVED, audit
            )
