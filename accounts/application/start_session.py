from typing import Callable

from accounts.application.cached_users import CachedUserRepository
from accounts.domain.entities import User
from accounts.domain.errors import WrongPassword
from accounts.domain.guards import ensure_found
from accounts.domain.ports.unit_of_work import UnitOfWorkPort


async def start_session(
    uow: UnitOfWorkPort,
    users: CachedUserRepository,
    email: str,
    password: str,
    verify_password: Callable[[str, str], bool],
) -> User:
    async with uow as transaction:
        user = ensure_found(await users.find_by_email(transaction, email))

    if not verify_password(password, user.password_hash):
        raise WrongPassword()
    return user
