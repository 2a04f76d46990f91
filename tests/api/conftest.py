import pytest
from fastapi.testclient import TestClient

from accounts.application.cached_users import CachedUserRepository
from accounts.main import create_app
from accounts.presentation.dependencies import (
    get_hash_password,
    get_notifier,
    get_otp_length,
    get_uow,
    get_users,
    get_verify_password,
)


@pytest.fixture()
def app_and_deps(db, uow, cache, otp_store, notifier):
    app = create_app()
    users = CachedUserRepository(cache, otp_store, otp_ttl_seconds=60)

    app.dependency_overrides[get_uow] = lambda: uow
    app.dependency_overrides[get_users] = lambda: users
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_hash_password] = lambda: (lambda plain: "hashed-" + plain)
    app.dependency_overrides[get_verify_password] = lambda: (
        lambda plain, hashed: hashed == "hashed-" + plain
    )
    app.dependency_overrides[get_otp_length] = lambda: 6

    try:
        yield app, users
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    app, _ = app_and_deps
    # no context manager: the lifespan (real pool, redis, smtp) must not start
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def registered(client):
    response = client.post(
        "/api/users",
        json={
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "bio": "math",
            "password": "s3cret",
        },
    )
    assert response.status_code == 200
    return response.json()["data"]
