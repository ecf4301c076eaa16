from src.bale.schemas.auth import (
    BootstrapResult,
    CallerRead,
    CompanyRead,
    DemoAccountRequest,
    DemoAccountResponse,
    OtpRequest,
    OtpVerifyRequest,
    SessionResponse,
    UserRead,
    WarehouseRead,
)
from src.bale.schemas.invite import (
    AccessRequestCreate,
    AccessRequestRead,
    ActionResponse,
    ApproveInviteResponse,
    InviteCreateRequest,
    InviteCreateResponse,
    InviteLink,
    InviteRead,
    InviteSummary,
    InviteValidateRequest,
    InviteValidateResponse,
    PlatformInviteRead,
    RequestIdBody,
    invite_read_adapter,
)
from src.bale.schemas.pagination import PaginatedResponse
from src.bale.schemas.upgrade import (
    ApproveUpgradeResponse,
    RejectUpgradeBody,
    UpgradeRequestCreate,
    UpgradeRequestRead,
)

__all__ = [
    # Auth
    "BootstrapResult",
    "CallerRead",
    "CompanyRead",
    "DemoAccountRequest",
    "DemoAccountResponse",
    "OtpRequest",
    "OtpVerifyRequest",
    "SessionResponse",
    "UserRead",
    "WarehouseRead",
    # Invites
    "AccessRequestCreate",
    "AccessRequestRead",
    "ActionResponse",
    "ApproveInviteResponse",
    "InviteCreateRequest",
    "InviteCreateResponse",
    "InviteLink",
    "InviteRead",
    "InviteSummary",
    "InviteValidateRequest",
    "InviteValidateResponse",
    "PlatformInviteRead",
    "RequestIdBody",
    "invite_read_adapter",
    # Pagination
    "PaginatedResponse",
    # Upgrades
    "ApproveUpgradeResponse",
    "RejectUpgradeBody",
    "UpgradeRequestCreate",
    "UpgradeRequestRead",
]
