"""Company and warehouse factories."""

from uuid import uuid4

from polyfactory import Use

from src.bale.models import DEFAULT_WAREHOUSE_NAME, Company, Warehouse
from src.bale.models.base import utc_now
from tests.factories.base import BaseFactory


class CompanyFactory(BaseFactory):
    __model__ = Company

    id = Use(uuid4)
    name = Use(lambda: f"Company {uuid4().hex[:6]}")
    is_demo = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def demo(cls, **kwargs):
        """The shared demo tenant."""
        return cls.build(is_demo=True, name=kwargs.pop("name", "Demo Company"), **kwargs)


class WarehouseFactory(BaseFactory):
    __model__ = Warehouse

    id = Use(uuid4)
    company_id = None
    name = DEFAULT_WAREHOUSE_NAME
    created_by = None
    created_at = Use(utc_now)
