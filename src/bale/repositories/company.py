"""Repository for Company entity."""

from sqlmodel import select

from src.bale.models import Company
from src.bale.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    model = Company

    async def get_demo_company(self) -> Company | None:
        """Get the shared demo tenant."""
        result = await self.session.execute(
            select(Company).where(Company.is_demo == True)  # noqa: E712
        )
        return result.scalar_one_or_none()
