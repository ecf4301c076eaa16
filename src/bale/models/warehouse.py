"""Warehouse model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.bale.models.base import utc_now

DEFAULT_WAREHOUSE_NAME = "Main Warehouse"


class Warehouse(SQLModel, table=True):
    __tablename__ = "warehouses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", index=True)
    name: str = Field(default=DEFAULT_WAREHOUSE_NAME, max_length=200)
    created_by: str | None = Field(default=None, max_length=255)  # identity id
    created_at: datetime = Field(default_factory=utc_now)
