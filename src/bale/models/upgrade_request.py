"""Upgrade request model - a demo user's request for a full account."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from src.bale.models.base import utc_now
from src.bale.models.enums import UpgradeRequestStatus


class UpgradeRequest(SQLModel, table=True):
    __tablename__ = "upgrade_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_upgrade_requests_status",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    # Demo users share one identity, so email identifies the requester
    auth_user_id: str = Field(max_length=255, index=True)
    email: str = Field(max_length=255, index=True)
    name: str = Field(max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    company: str | None = Field(default=None, max_length=200)
    message: str | None = Field(default=None, max_length=2000)
    status: str = Field(default=UpgradeRequestStatus.PENDING.value, max_length=20)
    rejection_reason: str | None = Field(default=None, max_length=1000)
    rejected_by: UUID | None = Field(default=None)
    rejected_at: datetime | None = Field(default=None)
    approved_by: UUID | None = Field(default=None)
    approved_at: datetime | None = Field(default=None)
    # Set on approval; user_id stays empty until the requester is linked
    company_id: UUID | None = Field(default=None, foreign_key="companies.id")
    user_id: UUID | None = Field(default=None, foreign_key="users.id")
    from_shared_demo: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
