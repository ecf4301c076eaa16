"""Authorization policy over a resolved caller.

Resolution happens per request in the API dependencies; these checks are
pure functions of the caller they are given.
"""

from dataclasses import dataclass
from uuid import UUID

from src.bale.core.exceptions import AuthorizationDenied
from src.bale.core.security import Identity
from src.bale.models import User


@dataclass(frozen=True)
class CallerContext:
    """An authenticated identity plus its user record, if provisioned."""

    identity: Identity
    user: User | None = None

    @property
    def demo_mode(self) -> bool:
        """Authenticated but not provisioned."""
        return self.user is None

    @property
    def tenant_id(self) -> UUID | None:
        return self.user.company_id if self.user is not None else None

    @property
    def has_full_access(self) -> bool:
        return self.user is not None and not self.user.is_demo


def require_admin(caller: CallerContext) -> User:
    """Admin of a real company. Demo admins are refused."""
    user = caller.user
    if user is None:
        raise AuthorizationDenied("no user record (demo mode)")
    if not user.is_admin:
        raise AuthorizationDenied(f"role={user.role} is_demo={user.is_demo}")
    return user


def require_superadmin(caller: CallerContext) -> User:
    user = require_admin(caller)
    if not user.is_platform_superadmin:
        raise AuthorizationDenied("not a super admin")
    return user
