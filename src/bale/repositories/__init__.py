"""Repository layer for data access."""

from src.bale.repositories.base import BaseRepository
from src.bale.repositories.company import CompanyRepository
from src.bale.repositories.invite import InviteRepository
from src.bale.repositories.upgrade_request import UpgradeRequestRepository
from src.bale.repositories.user import UserRepository
from src.bale.repositories.warehouse import WarehouseRepository

__all__ = [
    "BaseRepository",
    "CompanyRepository",
    "InviteRepository",
    "UpgradeRequestRepository",
    "UserRepository",
    "WarehouseRepository",
]
