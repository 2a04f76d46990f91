import accounts.domain.services as domain_services
from accounts.application.cached_users import CachedUserRepository
from accounts.domain.entities import Otp, normalize_email
from accounts.domain.errors import UserAlreadyActive
from accounts.domain.guards import ensure_found
from accounts.domain.ports.notifier import NotifierPort
from accounts.domain.ports.unit_of_work import UnitOfWorkPort


async def request_new_otp(
    uow: UnitOfWorkPort,
    users: CachedUserRepository,
    notifier: NotifierPort,
    email: str,
    otp_length: int = 6,
) -> None:
    normalized_email = normalize_email(email)

    async with uow as transaction:
        user = ensure_found(await users.find_by_email(transaction, normalized_email))
        if user.is_active:
            raise UserAlreadyActive()
        generated_code = domain_services.generate_otp(otp_length)
        await users.get_new_otp(Otp.issue(normalized_email, generated_code))
        # no state change in the store; no commit needed

    notifier.send_otp(normalized_email, generated_code)
