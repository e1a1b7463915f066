"""User repository protocol."""

from typing import Protocol

from domain.entities.user import User


class IUserRepository(Protocol):
    """Repository interface for User entities."""

    async def get_user_by_user_id(self, user_id: int) -> User:
        """Get a user by ID. Raises UserNotFoundError if missing."""
        ...
