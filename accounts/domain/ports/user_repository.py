from __future__ import annotations

from typing import Optional, Protocol

from accounts.domain.entities import User


class UserRepositoryPort(Protocol):
    """Durable user rows, bound to the caller's transaction. Never commits."""

    async def create(self, user: User) -> User:
        """
        Insert a new row and return it with the store-assigned id.
        Raise EmailAlreadyUsed if the unique email index rejects it.
        """

    async def save(self, user: User) -> Optional[User]:
        """Overwrite every column of the row `user.id`. Return None if it is gone."""

    async def delete(self, user_id: int) -> bool:
        """Delete the row. Return False if nothing was deleted."""

    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Return None if not found."""

    async def find_by_id_for_update(self, user_id: int) -> Optional[User]:
        """Like find_by_id, but row-locked until the transaction ends."""

    async def find_by_email(self, email: str) -> Optional[User]:
        """Return None if not found."""

    async def find_all(self) -> list[User]:
        """Every row, ascending by id."""

    async def set_active(self, email: str) -> Optional[User]:
        """Mark the user active and return the updated row (None if not found)."""
