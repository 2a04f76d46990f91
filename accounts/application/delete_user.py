from accounts.application.cached_users import CachedUserRepository
from accounts.domain.guards import ensure_found
from accounts.domain.ports.unit_of_work import UnitOfWorkPort


async def delete_user(
    uow: UnitOfWorkPort,
    users: CachedUserRepository,
    user_id: int,
) -> None:
    async with uow as transaction:
        user = ensure_found(await users.find_by_id(transaction, user_id))
        await users.delete(transaction, user)
        await transaction.commit()

    # only drop a pending code once the row is really gone
    await users.discard_otp(user.email)
