"""Repository for Warehouse entity."""

from uuid import UUID

from sqlmodel import select

from src.bale.models import Warehouse
from src.bale.repositories.base import BaseRepository


class WarehouseRepository(BaseRepository[Warehouse]):
    model = Warehouse

    async def list_by_company(self, company_id: UUID) -> list[Warehouse]:
        """List a company's warehouses, oldest first."""
        result = await self.session.execute(
            select(Warehouse)
            .where(Warehouse.company_id == company_id)
            .order_by(Warehouse.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())
