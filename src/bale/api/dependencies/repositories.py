"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.bale.api.dependencies.db import DBSession
from src.bale.repositories import (
    CompanyRepository,
    InviteRepository,
    UpgradeRequestRepository,
    UserRepository,
    WarehouseRepository,
)


def get_company_repository(session: DBSession) -> CompanyRepository:
    return CompanyRepository(session)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_warehouse_repository(session: DBSession) -> WarehouseRepository:
    return WarehouseRepository(session)


def get_invite_repository(session: DBSession) -> InviteRepository:
    return InviteRepository(session)


def get_upgrade_request_repository(session: DBSession) -> UpgradeRequestRepository:
    return UpgradeRequestRepository(session)


CompanyRepo = Annotated[CompanyRepository, Depends(get_company_repository)]
UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
WarehouseRepo = Annotated[WarehouseRepository, Depends(get_warehouse_repository)]
InviteRepo = Annotated[InviteRepository, Depends(get_invite_repository)]
UpgradeRepo = Annotated[UpgradeRequestRepository, Depends(get_upgrade_request_repository)]
