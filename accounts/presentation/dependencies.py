from functools import partial
from typing import Callable

from fastapi import Request

from accounts.application.cached_users import CachedUserRepository
from accounts.domain.ports.notifier import NotifierPort
from accounts.domain.ports.unit_of_work import UnitOfWorkPort
from accounts.infrastructure.db.uow import PgUnitOfWork
from accounts.infrastructure.security.password import hash_password, verify_password


# The shared clients below are built in accounts.main lifespan() and kept on app.state.


def get_uow(request: Request) -> UnitOfWorkPort:
    return PgUnitOfWork(request.app.state.pool)


def get_users(request: Request) -> CachedUserRepository:
    return request.app.state.users


def get_notifier(request: Request) -> NotifierPort:
    return request.app.state.notifier


def get_hash_password(request: Request) -> Callable[..., str]:
    return partial(hash_password, rounds=request.app.state.settings.bcrypt_rounds)


def get_verify_password() -> Callable[[str, str], bool]:
    return verify_password


def get_otp_length(request: Request) -> int:
    return request.app.state.settings.otp_length
