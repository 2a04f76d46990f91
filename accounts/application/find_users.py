from accounts.application.cached_users import CachedUserRepository
from accounts.domain.entities import User
from accounts.domain.guards import ensure_found
from accounts.domain.ports.unit_of_work import UnitOfWorkPort


async def find_user_by_id(
    uow: UnitOfWorkPort, users: CachedUserRepository, user_id: int
) -> User:
    async with uow as transaction:
        return ensure_found(await users.find_by_id(transaction, user_id))


async def find_user_by_email(
    uow: UnitOfWorkPort, users: CachedUserRepository, email: str
) -> User:
    async with uow as transaction:
        return ensure_found(await users.find_by_email(transaction, email))


async def find_all_users(uow: UnitOfWorkPort, users: CachedUserRepository) -> list[User]:
    async with uow as transaction:
        return await users.find_all(transaction)
