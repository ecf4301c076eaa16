"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, InviteFactory, ...
"""

from tests.factories.base import BaseFactory
from tests.factories.company import CompanyFactory, WarehouseFactory
from tests.factories.invite import InviteFactory, UpgradeRequestFactory
from tests.factories.user import UserFactory

__all__ = [
    "BaseFactory",
    "CompanyFactory",
    "InviteFactory",
    "UpgradeRequestFactory",
    "UserFactory",
    "WarehouseFactory",
]
