"""Repository for User entity."""

from sqlmodel import select

from src.bale.models import User
from src.bale.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_auth_user_id(self, auth_user_id: str) -> User | None:
        """Get the user record linked to an external identity."""
        result = await self.session.execute(
            select(User).where(User.auth_user_id == auth_user_id)
        )
        return result.scalar_one_or_none()
