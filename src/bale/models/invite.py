"""Invite model - platform signup grants and access requests."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.bale.models.base import utc_now
from src.bale.models.enums import PLATFORM_INVITE_TYPE, InviteKind, InviteStatus

# JSONB on PostgreSQL, plain JSON elsewhere
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


class Invite(SQLModel, table=True):
    """Invite row.

    ``kind`` tells platform invites apart from access requests. The
    ``requester_*`` columns are only populated for access requests. Audit
    stamps (rejected_at, approved_by, ...) are merged into ``audit``, stored
    in the ``metadata`` column. Actor stamps hold the identity id, like
    ``invited_by``. Rows are never deleted.
    """

    __tablename__ = "invites"
    __table_args__ = (
        CheckConstraint(
            "kind IN ('platform_invite', 'access_request')", name="ck_invites_kind"
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'revoked')", name="ck_invites_status"
        ),
        Index("ix_invites_code_email_status", "code", "email", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    code: str = Field(max_length=32, index=True)
    email: str = Field(max_length=255, index=True)
    invite_type: str = Field(default=PLATFORM_INVITE_TYPE, max_length=20)
    kind: str = Field(default=InviteKind.PLATFORM_INVITE.value, max_length=20)
    status: str = Field(default=InviteStatus.PENDING.value, max_length=20)
    expires_at: datetime
    invited_by: str | None = Field(default=None, max_length=255)  # identity id

    # Access request fields
    requester_name: str | None = Field(default=None, max_length=200)
    requester_company: str | None = Field(default=None, max_length=200)
    requester_phone: str | None = Field(default=None, max_length=50)
    message: str | None = Field(default=None, max_length=2000)

    audit: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column("metadata", JSONVariant, nullable=False, default=dict),
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def is_usable(self, now: datetime) -> bool:
        """Pending and not yet expired."""
        return self.status == InviteStatus.PENDING.value and self.expires_at > now
