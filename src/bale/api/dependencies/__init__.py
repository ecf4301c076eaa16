"""FastAPI dependency injection definitions."""

# Auth
from src.bale.api.dependencies.auth import (
    AdminUser,
    AuthenticatedCaller,
    CurrentIdentity,
    OptionalCaller,
    SuperAdmin,
    get_admin_user,
    get_authenticated_caller,
    get_caller,
    get_identity,
    get_superadmin_user,
)

# Database
from src.bale.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.bale.api.dependencies.repositories import (
    CompanyRepo,
    InviteRepo,
    UpgradeRepo,
    UserRepo,
    WarehouseRepo,
    get_company_repository,
    get_invite_repository,
    get_upgrade_request_repository,
    get_user_repository,
    get_warehouse_repository,
)

# Services
from src.bale.api.dependencies.services import (
    AccountServiceDep,
    AuthProviderDep,
    BootstrapServiceDep,
    InviteServiceDep,
    UpgradeServiceDep,
    get_account_service,
    get_auth_provider,
    get_bootstrap_service,
    get_invite_service,
    get_upgrade_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "AdminUser",
    "AuthenticatedCaller",
    "CurrentIdentity",
    "OptionalCaller",
    "SuperAdmin",
    "get_admin_user",
    "get_authenticated_caller",
    "get_caller",
    "get_identity",
    "get_superadmin_user",
    # Repositories
    "CompanyRepo",
    "InviteRepo",
    "UpgradeRepo",
    "UserRepo",
    "WarehouseRepo",
    "get_company_repository",
    "get_invite_repository",
    "get_upgrade_request_repository",
    "get_user_repository",
    "get_warehouse_repository",
    # Services
    "AccountServiceDep",
    "AuthProviderDep",
    "BootstrapServiceDep",
    "InviteServiceDep",
    "UpgradeServiceDep",
    "get_account_service",
    "get_auth_provider",
    "get_bootstrap_service",
    "get_invite_service",
    "get_upgrade_service",
]
