"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.bale.api.dependencies.db import DBSession
from src.bale.api.dependencies.repositories import (
    CompanyRepo,
    InviteRepo,
    UpgradeRepo,
    UserRepo,
    WarehouseRepo,
)
from src.bale.core.auth_provider import AuthProviderClient
from src.bale.services import (
    AccountService,
    InviteService,
    TenantBootstrapService,
    UpgradeRequestService,
)


def get_auth_provider() -> AuthProviderClient:
    """Hosted auth provider client. Overridden in tests."""
    return AuthProviderClient()


def get_invite_service(invite_repo: InviteRepo, session: DBSession) -> InviteService:
    return InviteService(invite_repo, session)


def get_bootstrap_service(
    user_repo: UserRepo,
    invite_repo: InviteRepo,
    upgrade_repo: UpgradeRepo,
    session: DBSession,
) -> TenantBootstrapService:
    return TenantBootstrapService(user_repo, invite_repo, upgrade_repo, session)


BootstrapServiceDep = Annotated[TenantBootstrapService, Depends(get_bootstrap_service)]


def get_upgrade_service(
    upgrade_repo: UpgradeRepo,
    user_repo: UserRepo,
    bootstrap: BootstrapServiceDep,
    session: DBSession,
) -> UpgradeRequestService:
    return UpgradeRequestService(upgrade_repo, user_repo, bootstrap, session)


def get_account_service(
    company_repo: CompanyRepo, warehouse_repo: WarehouseRepo
) -> AccountService:
    return AccountService(company_repo, warehouse_repo)


AuthProviderDep = Annotated[AuthProviderClient, Depends(get_auth_provider)]
InviteServiceDep = Annotated[InviteService, Depends(get_invite_service)]
UpgradeServiceDep = Annotated[UpgradeRequestService, Depends(get_upgrade_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
