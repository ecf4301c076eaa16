"""Model exports.

Import from here: `from src.bale.models import User, Company`
"""

from src.bale.models.company import Company
from src.bale.models.enums import (
    PLATFORM_INVITE_TYPE,
    InviteKind,
    InviteStatus,
    UpgradeRequestStatus,
    UserRole,
)
from src.bale.models.invite import Invite
from src.bale.models.upgrade_request import UpgradeRequest
from src.bale.models.user import User
from src.bale.models.warehouse import DEFAULT_WAREHOUSE_NAME, Warehouse

__all__ = [
    # Enums
    "PLATFORM_INVITE_TYPE",
    "InviteKind",
    "InviteStatus",
    "UpgradeRequestStatus",
    "UserRole",
    # Models
    "Company",
    "DEFAULT_WAREHOUSE_NAME",
    "Invite",
    "UpgradeRequest",
    "User",
    "Warehouse",
]
