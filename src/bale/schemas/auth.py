"""Authentication and account schemas."""

from uuid import UUID

from pydantic import EmailStr, Field

from src.bale.schemas.base import CamelModel


class BootstrapResult(CamelModel):
    """Outcome of first-login provisioning."""

    success: bool
    already_exists: bool | None = None
    company_id: UUID | None = None
    user_id: UUID | None = None
    warehouse_id: UUID | None = None
    error: str | None = None


class OtpRequest(CamelModel):
    email: EmailStr


class OtpVerifyRequest(CamelModel):
    email: EmailStr
    token: str = Field(min_length=4, max_length=12)


class SessionResponse(CamelModel):
    success: bool = True
    redirect_to: str


class DemoAccountRequest(CamelModel):
    user_id: str = Field(min_length=1)
    email: str = Field(min_length=1)


class DemoAccountResponse(CamelModel):
    success: bool = True
    message: str
    has_full_access: bool


class UserRead(CamelModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    role: str
    is_demo: bool
    is_superadmin: bool


class CompanyRead(CamelModel):
    id: UUID
    name: str
    is_demo: bool


class WarehouseRead(CamelModel):
    id: UUID
    name: str


class CallerRead(CamelModel):
    identity_id: str
    email: str | None
    demo_mode: bool
    user: UserRead | None = None
    company: CompanyRead | None = None
    warehouses: list[WarehouseRead] = []
