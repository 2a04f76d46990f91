from accounts.application.cached_users import CachedUserRepository
from accounts.domain.entities import User, normalize_email
from accounts.domain.guards import ensure_email_free, ensure_found
from accounts.domain.ports.unit_of_work import UnitOfWorkPort


async def update_user(
    uow: UnitOfWorkPort,
    users: CachedUserRepository,
    user_id: int,
    email: str,
    first_name: str = "",
    last_name: str = "",
    bio: str = "",
) -> User:
    normalized_email = normalize_email(email)

    async with uow as transaction:
        # fields not in the request (is_active, password_hash) come from the
        # locked store row, never from a possibly stale cached copy
        user = ensure_found(await users.find_for_update(transaction, user_id))
        previous_email = user.email

        if previous_email != normalized_email:
            taken = await users.find_by_email(transaction, normalized_email)
            ensure_email_free(normalized_email, taken)

        user.first_name = first_name
        user.last_name = last_name
        user.email = normalized_email
        user.bio = bio

        updated = await users.update(transaction, user, previous_email=previous_email)
        try:
            await transaction.commit()
        except BaseException:
            # the cache already holds the rolled-back values
            await users.evict(updated)
            raise

    return updated
