from src.bale.services.account_service import AccountService
from src.bale.services.authorization import CallerContext, require_admin, require_superadmin
from src.bale.services.bootstrap_service import TenantBootstrapService
from src.bale.services.invite_service import InviteService, InviteValidation
from src.bale.services.upgrade_service import UpgradeApproval, UpgradeRequestService

__all__ = [
    "AccountService",
    "CallerContext",
    "InviteService",
    "InviteValidation",
    "TenantBootstrapService",
    "UpgradeApproval",
    "UpgradeRequestService",
    "require_admin",
    "require_superadmin",
]
