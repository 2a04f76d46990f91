from __future__ import annotations

from accounts.domain.entities import User
from accounts.domain.errors import EmailAlreadyUsed, UserNotFound


def ensure_found(user: User | None) -> User:
    """Raise UserNotFound unless the lookup produced a stored row."""
    if user is None or not user.id:
        raise UserNotFound()
    return user


def ensure_email_free(candidate: str, found: User | None) -> None:
    if found is not None and found.email == candidate:
        raise EmailAlreadyUsed()
