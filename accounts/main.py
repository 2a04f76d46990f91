from contextlib import asynccontextmanager

from fastapi import FastAPI

from accounts.application.cached_users import CachedUserRepository
from accounts.infrastructure.db.pool import create_pool
from accounts.infrastructure.email.http_smtp_adapter import HttpSmtpEmailAdapter
from accounts.infrastructure.email.otp_notifier import OtpNotifier
from accounts.infrastructure.redis_cache.otp_store import RedisOtpStore
from accounts.infrastructure.redis_cache.pool import create_redis
from accounts.infrastructure.redis_cache.user_cache import RedisUserCache
from accounts.logging import setup_logging
from accounts.presentation.api import api
from accounts.presentation.errors import register_error_handlers
from accounts.settings import Settings, get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # startup: every shared client is built here and handed out via app.state
    pool = create_pool(settings.database_url)
    await pool.open()

    redis = create_redis(settings.redis_url)

    email_adapter = HttpSmtpEmailAdapter(
        base_url=settings.smtp_base_url,
        sender=settings.smtp_sender,
        timeout=settings.smtp_timeout_seconds,
    )
    notifier = OtpNotifier(
        email_adapter, drain_timeout=settings.notifier_drain_timeout_seconds
    )

    app.state.pool = pool
    app.state.notifier = notifier
    app.state.users = CachedUserRepository(
        RedisUserCache(redis),
        RedisOtpStore(redis),
        cache_ttl_seconds=settings.user_cache_ttl_seconds,
        otp_ttl_seconds=settings.otp_ttl_seconds,
    )

    try:
        yield
    finally:
        # shutdown
        await notifier.aclose()  # before the adapter it sends through
        await email_adapter.aclose()
        await redis.aclose()
        await pool.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(title="Account API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    register_error_handlers(app)
    app.include_router(api)
    return app


app = create_app()
