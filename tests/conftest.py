import pytest

from accounts.application.cached_users import CachedUserRepository
from tests.fakes import (
    FakeDatabase,
    FakeNotifier,
    FakeOtpStore,
    FakeUoW,
    FakeUserCache,
)


@pytest.fixture()
def db():
    return FakeDatabase()


@pytest.fixture()
def uow(db):
    return FakeUoW(db)


@pytest.fixture()
def cache():
    return FakeUserCache()


@pytest.fixture()
def otp_store():
    return FakeOtpStore()


@pytest.fixture()
def users(cache, otp_store):
    return CachedUserRepository(cache, otp_store, otp_ttl_seconds=600)


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def hash_password_stub():
    return lambda p: "hashed-" + p


@pytest.fixture(autouse=True)
def patch_code(monkeypatch):
    """
    Make the OTP deterministic in all tests.
    You can override in a specific test by re-monkeypatching.
    """
    from accounts.domain import services as domain_services

    monkeypatch.setattr(domain_services, "generate_otp", lambda length=6: "123456")
    yield
