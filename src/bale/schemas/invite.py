"""Invite schemas."""

from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import (
    AliasChoices,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    field_validator,
)

from src.bale.schemas.base import CamelModel


class InviteCreateRequest(CamelModel):
    email: EmailStr


class InviteLink(CamelModel):
    """What the inviter gets back to share."""

    email: str
    code: str
    magic_link: str
    expires_at: datetime


class InviteCreateResponse(CamelModel):
    success: bool = True
    invite: InviteLink


class InviteValidateRequest(CamelModel):
    """Lenient on purpose: bad input becomes valid=false, never a 4xx."""

    model_config = ConfigDict(extra="ignore")

    code: str | None = None
    email: str | None = None

    @field_validator("code", "email", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str | None:
        if v is None or isinstance(v, (dict, list)):
            return None
        return str(v)


class InviteSummary(CamelModel):
    id: UUID
    code: str
    email: str
    expires_at: datetime


class InviteValidateResponse(CamelModel):
    valid: bool
    invite: InviteSummary | None = None
    error: str | None = None


class AccessRequestCreate(CamelModel):
    """Self-service request for a platform invite."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    name: str = Field(min_length=1, max_length=200)
    company: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    message: str | None = Field(default=None, max_length=2000)


class RequestIdBody(CamelModel):
    request_id: UUID


class ActionResponse(CamelModel):
    success: bool = True
    message: str


class ApproveInviteResponse(ActionResponse):
    invite_id: UUID
    invite_code: str
    invite_link: str


class _InviteReadBase(CamelModel):
    id: UUID
    code: str
    email: str
    status: str
    expires_at: datetime
    invited_by: str | None = None
    audit: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("audit", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime
    updated_at: datetime


class PlatformInviteRead(_InviteReadBase):
    kind: Literal["platform_invite"]


class AccessRequestRead(_InviteReadBase):
    kind: Literal["access_request"]
    requester_name: str | None = None
    requester_company: str | None = None
    requester_phone: str | None = None
    message: str | None = None


InviteRead = Annotated[PlatformInviteRead | AccessRequestRead, Field(discriminator="kind")]

invite_read_adapter: TypeAdapter[PlatformInviteRead | AccessRequestRead] = TypeAdapter(InviteRead)
