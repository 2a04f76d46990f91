from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import errors as pg_errors

from accounts.domain.entities import User
from accounts.domain.errors import EmailAlreadyUsed
from accounts.domain.ports.user_repository import UserRepositoryPort

_COLUMNS = "id, email, first_name, last_name, bio, password_hash, is_active"


def _to_user(row: tuple) -> User:
    id_, email, first_name, last_name, bio, password_hash, is_active = row
    return User(
        id=int(id_),
        email=str(email),
        first_name=first_name or "",
        last_name=last_name or "",
        bio=bio or "",
        password_hash=password_hash or "",
        is_active=bool(is_active),
    )


class PgUserRepository(UserRepositoryPort):
    """
    Postgres implementation of UserRepositoryPort.

    NOTE:
    - This repo is constructed with an *active async connection* supplied by the UoW.
    - It does not commit; the UnitOfWork controls the transaction boundary.
    """

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self._conn = conn

    async def create(self, user: User) -> User:
        sql = f"""
        INSERT INTO users (email, first_name, last_name, bio, password_hash, is_active)
        VALUES (LOWER(TRIM(%s)), %s, %s, %s, %s, %s)
        RETURNING {_COLUMNS}
        """
        params = (
            user.email,
            user.first_name,
            user.last_name,
            user.bio,
            user.password_hash,
            user.is_active,
        )
        try:
            async with self._conn.cursor() as cur:
                await cur.execute(sql, params)
                row = await cur.fetchone()
        except pg_errors.UniqueViolation as e:
            # lost the check-then-insert race to a concurrent registration
            raise EmailAlreadyUsed() from e

        if not row:
            raise RuntimeError("insert into users returned no row")
        return _to_user(row)

    async def save(self, user: User) -> Optional[User]:
        sql = f"""
        UPDATE users
        SET email = LOWER(TRIM(%s)),
            first_name = %s,
            last_name = %s,
            bio = %s,
            password_hash = %s,
            is_active = %s,
            updated_at = now()
        WHERE id = %s
        RETURNING {_COLUMNS}
        """
        params = (
            user.email,
            user.first_name,
            user.last_name,
            user.bio,
            user.password_hash,
            user.is_active,
            user.id,
        )
        try:
            async with self._conn.cursor() as cur:
                await cur.execute(sql, params)
                row = await cur.fetchone()
        except pg_errors.UniqueViolation as e:
            raise EmailAlreadyUsed() from e
        return _to_user(row) if row else None

    async def delete(self, user_id: int) -> bool:
        async with self._conn.cursor() as cur:
            await cur.execute("DELETE FROM users WHERE id = %s", (user_id,))
            return cur.rowcount > 0

    async def find_by_id(self, user_id: int) -> Optional[User]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE id = %s"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (user_id,))
            row = await cur.fetchone()
        return _to_user(row) if row else None

    async def find_by_id_for_update(self, user_id: int) -> Optional[User]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE id = %s FOR UPDATE"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (user_id,))
            row = await cur.fetchone()
        return _to_user(row) if row else None

    async def find_by_email(self, email: str) -> Optional[User]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE email = LOWER(TRIM(%s))"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (email,))
            row = await cur.fetchone()
        return _to_user(row) if row else None

    async def find_all(self) -> list[User]:
        sql = f"SELECT {_COLUMNS} FROM users ORDER BY id ASC"
        async with self._conn.cursor() as cur:
            await cur.execute(sql)
            rows = await cur.fetchall()
        return [_to_user(r) for r in rows]

    async def set_active(self, email: str) -> Optional[User]:
        sql = f"""
        UPDATE users
        SET is_active = TRUE, updated_at = now()
        WHERE email = LOWER(TRIM(%s))
        RETURNING {_COLUMNS}
        """
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (email,))
            row = await cur.fetchone()
        return _to_user(row) if row else None
