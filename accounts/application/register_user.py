from typing import Callable

import accounts.domain.services as domain_services
from accounts.application.cached_users import CachedUserRepository
from accounts.domain.entities import Otp, User, normalize_email
from accounts.domain.guards import ensure_email_free
from accounts.domain.ports.notifier import NotifierPort
from accounts.domain.ports.unit_of_work import UnitOfWorkPort


async def register_user(
    uow: UnitOfWorkPort,
    users: CachedUserRepository,
    notifier: NotifierPort,
    email: str,
    password: str,
    hash_password: Callable[..., str],
    first_name: str = "",
    last_name: str = "",
    bio: str = "",
    otp_length: int = 6,
) -> User:
    normalized_email = normalize_email(email)

    async with uow as transaction:
        existing = await users.find_by_email(transaction, normalized_email)
        ensure_email_free(normalized_email, existing)

        user = User(
            email=normalized_email,
            first_name=first_name,
            last_name=last_name,
            bio=bio,
            password_hash=hash_password(password),
            is_active=False,
        )
        generated_code = domain_services.generate_otp(otp_length)
        created = await users.save(
            transaction, user, Otp.issue(normalized_email, generated_code)
        )
        try:
            await transaction.commit()
        except BaseException:
            await users.discard_otp(normalized_email)
            raise

    # only mail codes for registrations that actually committed
    notifier.send_otp(normalized_email, generated_code)
    return created
