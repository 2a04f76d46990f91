from __future__ import annotations

from psycopg_pool import AsyncConnectionPool


def _add_connect_timeout(dsn: str, seconds: int = 3) -> str:
    if "connect_timeout=" in dsn:
        return dsn
    sep = "&" if "?" in dsn else "?"
    return f"{dsn}{sep}connect_timeout={seconds}"


def create_pool(dsn: str, *, min_size: int = 1, max_size: int = 10) -> AsyncConnectionPool:
    """
    Build the pool WITHOUT opening it; the app lifespan opens and closes it.
    """
    return AsyncConnectionPool(
        _add_connect_timeout(dsn),
        min_size=min_size,
        max_size=max_size,
        timeout=5,
        open=False,  # created closed; caller decides when to open
    )
