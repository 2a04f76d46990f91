import os
from pathlib import Path

import pytest
import pytest_asyncio
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from accounts.infrastructure.db.pool import create_pool
from accounts.infrastructure.redis_cache.pool import create_redis

REDIS_URL = os.environ.get("REDIS_URL", "redis://redis:6379/0")
DATABASE_URL = os.environ.get("DATABASE_URL", "postgresql://app:app@db:5432/app")
MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"


@pytest_asyncio.fixture
async def redis_client() -> Redis:
    r = create_redis(REDIS_URL)
    try:
        await r.ping()
    except (RedisConnectionError, RedisTimeoutError, OSError):
        await r.aclose()
        pytest.skip(f"redis not reachable at {REDIS_URL}")
    try:
        yield r
    finally:
        await r.aclose()


@pytest_asyncio.fixture
async def pool():
    p = create_pool(DATABASE_URL, max_size=2)
    try:
        await p.open(wait=True, timeout=5)
    except Exception:  # noqa: BLE001
        await p.close()
        pytest.skip(f"postgres not reachable at {DATABASE_URL}")

    async with p.connection() as conn:
        for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
            await conn.execute(path.read_text(encoding="utf-8"))
        await conn.execute("TRUNCATE users RESTART IDENTITY;")

    try:
        yield p
    finally:
        async with p.connection() as conn:
            await conn.execute("TRUNCATE users RESTART IDENTITY;")
        await p.close()
