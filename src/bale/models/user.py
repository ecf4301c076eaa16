"""User record - tenant-scoped profile linked to an external identity."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.bale.models.base import utc_now
from src.bale.models.enums import UserRole


class User(SQLModel, table=True):
    """Tenant-scoped user record.

    ``auth_user_id`` is the external identity's id. It is unique on its own,
    so concurrent first logins for one identity can never create two tenants.
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", index=True)
    auth_user_id: str = Field(max_length=255, unique=True, index=True)
    email: str = Field(max_length=255, index=True)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    phone_number: str | None = Field(default=None, max_length=50)
    role: str = Field(default=UserRole.STAFF.value, max_length=20)
    is_demo: bool = Field(default=False)
    is_superadmin: bool = Field(default=False)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        """Admin of a real (non-demo) company."""
        return self.is_active and self.role == UserRole.ADMIN.value and not self.is_demo

    @property
    def is_platform_superadmin(self) -> bool:
        return self.is_admin and self.is_superadmin
