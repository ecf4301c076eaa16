"""Upgrade request schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, EmailStr, Field

from src.bale.schemas.base import CamelModel
from src.bale.schemas.invite import ActionResponse, RequestIdBody


class UpgradeRequestCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    company: str | None = Field(default=None, max_length=200)
    message: str | None = Field(default=None, max_length=2000)


class RejectUpgradeBody(RequestIdBody):
    reason: str | None = Field(default=None, max_length=1000)


class UpgradeRequestRead(CamelModel):
    id: UUID
    email: str
    name: str
    phone: str | None
    company: str | None
    message: str | None
    status: str
    rejection_reason: str | None
    created_at: datetime
    updated_at: datetime


class ApproveUpgradeResponse(ActionResponse):
    company_id: UUID
    warehouse_id: UUID
    user_id: UUID | None = Field(
        default=None,
        description="None when the account is linked on the requester's next login.",
    )
