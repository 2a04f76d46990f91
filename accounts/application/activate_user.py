from accounts.application.cached_users import CachedUserRepository
from accounts.domain.entities import User, normalize_email
from accounts.domain.ports.unit_of_work import UnitOfWorkPort


async def activate_user(
    uow: UnitOfWorkPort,
    users: CachedUserRepository,
    email: str,
    code: str,
) -> User:
    """
    Pending -> Verified.

    The OTP is consumed before the commit and put back if the commit fails,
    so the request never ends with the user active and the code still
    outstanding, nor with the code gone and the user still pending.
    """
    normalized_email = normalize_email(email)

    async with uow as transaction:
        otp = await users.find_otp(normalized_email, code)
        user = await users.update_status_email(transaction, otp)
        try:
            await users.del_otp(otp)
        except BaseException:
            # uncommitted activation was already written through
            await users.evict(user)
            raise

        try:
            await transaction.commit()
        except BaseException:
            await users.restore_otp(otp)
            await users.evict(user)
            raise

    return user
