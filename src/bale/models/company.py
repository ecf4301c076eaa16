"""Company (tenant) model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from src.bale.models.base import utc_now


class Company(SQLModel, table=True):
    """An isolated customer organization owning its users and warehouses."""

    __tablename__ = "companies"
    __table_args__ = (
        # At most one shared demo tenant
        Index(
            "uq_companies_single_demo",
            "is_demo",
            unique=True,
            postgresql_where=text("is_demo"),
            sqlite_where=text("is_demo = 1"),
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200)
    is_demo: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
