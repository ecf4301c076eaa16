"""Shared enums for models."""

from enum import Enum

# invites.invite_type for signup grants into a new tenant
PLATFORM_INVITE_TYPE = "platform"


class UserRole(str, Enum):
    """User role within a company."""

    ADMIN = "admin"
    STAFF = "staff"


class InviteKind(str, Enum):
    """What an invite row represents.

    A platform invite is issued by someone already on the platform. An access
    request is submitted by a prospect and waits for an admin decision.
    """

    PLATFORM_INVITE = "platform_invite"
    ACCESS_REQUEST = "access_request"


class InviteStatus(str, Enum):
    """Invite status. Only PENDING can transition."""

    PENDING = "pending"
    APPROVED = "approved"
    REVOKED = "revoked"


class UpgradeRequestStatus(str, Enum):
    """Demo-to-full upgrade request status. Only PENDING can transition."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
