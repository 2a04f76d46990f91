from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"

    # Infra
    database_url: str = "postgresql://app:app@db:5432/app"
    redis_url: str = "redis://redis:6379/0"
    smtp_base_url: str = "http://smtp-mock:8025"
    smtp_sender: str = "no-reply@accounts.local"
    smtp_timeout_seconds: float = 5.0

    # Security / policies
    bcrypt_rounds: int = 12
    otp_length: int = 6
    otp_ttl_seconds: int = 600  # 0 -> codes never expire

    # Cache
    user_cache_ttl_seconds: int = 0  # 0 -> no deadline

    # Notifier
    notifier_drain_timeout_seconds: float = 5.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
