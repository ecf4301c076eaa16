"""Account status for the caller - demo mode, tenant and warehouses."""

from src.bale.core.exceptions import AuthenticationRequired
from src.bale.core.logging import get_logger
from src.bale.repositories import CompanyRepository, WarehouseRepository
from src.bale.schemas.auth import (
    CallerRead,
    CompanyRead,
    DemoAccountResponse,
    UserRead,
    WarehouseRead,
)
from src.bale.services.authorization import CallerContext

logger = get_logger(__name__)


class AccountService:
    def __init__(self, company_repo: CompanyRepository, warehouse_repo: WarehouseRepository):
        self.company_repo = company_repo
        self.warehouse_repo = warehouse_repo

    async def describe(self, caller: CallerContext) -> CallerRead:
        """Caller's effective tenant. Demo mode resolves to the shared demo company."""
        if caller.user is not None:
            company = await self.company_repo.get_by_id(caller.user.company_id)
        else:
            company = await self.company_repo.get_demo_company()

        warehouses = await self.warehouse_repo.list_by_company(company.id) if company else []
        return CallerRead(
            identity_id=caller.identity.id,
            email=caller.identity.email,
            demo_mode=caller.demo_mode,
            user=UserRead.model_validate(caller.user) if caller.user else None,
            company=CompanyRead.model_validate(company) if company else None,
            warehouses=[WarehouseRead.model_validate(w) for w in warehouses],
        )

    def check_demo_account(
        self, caller: CallerContext, user_id: str, email: str
    ) -> DemoAccountResponse:
        """Confirm the body names the caller, then report full or demo access."""
        if caller.identity.id != user_id:
            raise AuthenticationRequired("Unauthorized")

        if caller.user is not None:
            return DemoAccountResponse(
                message="User already has full access",
                has_full_access=True,
            )

        logger.info("Demo access granted", identity_id=caller.identity.id)
        return DemoAccountResponse(message="Demo access granted", has_full_access=False)
