from __future__ import annotations

import json
import logging
from dataclasses import asdict

from accounts.domain.entities import Otp, User, normalize_email
from accounts.domain.errors import OtpNotFound, UserNotFound, WrongOtp
from accounts.domain.ports.otp_store import OtpStorePort
from accounts.domain.ports.unit_of_work import UnitOfWorkPort
from accounts.domain.ports.user_cache import UserCachePort

logger = logging.getLogger(__name__)

# Included in every cache key ("user:v1:...").
# Bump it when User fields are added, removed or renamed: entries written with
# the previous shape are then never read again.
CACHE_SCHEMA_VERSION = 1


def cache_key_by_id(user_id: int) -> str:
    return f"user:v{CACHE_SCHEMA_VERSION}:id:{user_id}"


def cache_key_by_email(email: str) -> str:
    return f"user:v{CACHE_SCHEMA_VERSION}:email:{normalize_email(email)}"


def serialize_user(user: User) -> str:
    return json.dumps(asdict(user), separators=(",", ":"), sort_keys=True)


def deserialize_user(data: str) -> User:
    return User(**json.loads(data))


class CachedUserRepository:
    """
    Read-through / write-through layer between the use cases and the store.

    Store calls run inside the caller's unit of work; cache and OTP-store calls
    run outside it. The store is authoritative:

    - a lookup miss reads the store and populates both keys of the row only
      where they are still absent, so a slow reader never overwrites a newer
      write-through; an empty store result is never cached;
    - an undecodable entry is evicted and treated as a miss;
    - update writes the row, then overwrites both keys in one atomic step;
    - delete removes the row first and only then evicts both keys.

    Failed cache writes are logged and absorbed (the entries are evicted
    instead, so the next lookup repopulates from the store).
    """

    def __init__(
        self,
        cache: UserCachePort,
        otps: OtpStorePort,
        *,
        cache_ttl_seconds: int = 0,
        otp_ttl_seconds: int = 0,
    ) -> None:
        self._cache = cache
        self._otps = otps
        self._cache_ttl = cache_ttl_seconds or None
        self._otp_ttl = otp_ttl_seconds or None

    # -- read-through -------------------------------------------------------

    async def find_by_id(self, tx: UnitOfWorkPort, user_id: int) -> User | None:
        cached = await self._read_cached(cache_key_by_id(user_id))
        if cached is not None:
            logger.debug("user cache hit", extra={"user_id": user_id})
            return cached

        logger.debug("user cache miss", extra={"user_id": user_id})
        user = await tx.users.find_by_id(user_id)
        if user is not None:
            await self._populate(user)
        return user

    async def find_by_email(self, tx: UnitOfWorkPort, email: str) -> User | None:
        email = normalize_email(email)
        cached = await self._read_cached(cache_key_by_email(email))
        if cached is not None:
            logger.debug("user cache hit", extra={"email": email})
            return cached

        logger.debug("user cache miss", extra={"email": email})
        user = await tx.users.find_by_email(email)
        if user is not None:
            await self._populate(user)
        return user

    async def find_for_update(self, tx: UnitOfWorkPort, user_id: int) -> User | None:
        """Store row locked for the rest of `tx`; bypasses the cache."""
        return await tx.users.find_by_id_for_update(user_id)

    async def find_all(self, tx: UnitOfWorkPort) -> list[User]:
        return await tx.users.find_all()

    async def _read_cached(self, key: str) -> User | None:
        data = await self._cache.get(key)
        if data is None:
            return None
        try:
            return deserialize_user(data)
        except (ValueError, TypeError):
            # unreadable entry: drop it and fall back to the store
            logger.warning("user cache entry undecodable; evicting", extra={"key": key})
            await self._evict_keys(key)
            return None

    async def _populate(self, user: User) -> None:
        data = serialize_user(user)
        entries = {
            cache_key_by_id(user.id): data,
            cache_key_by_email(user.email): data,
        }
        try:
            await self._cache.populate(entries, self._cache_ttl)
        except Exception:  # noqa: BLE001
            logger.warning(
                "user cache populate failed",
                extra={"user_id": user.id},
                exc_info=True,
            )

    # -- writes -------------------------------------------------------------

    async def save(self, tx: UnitOfWorkPort, user: User, otp: Otp) -> User:
        """Insert the pending user and its OTP; an OTP-store failure aborts both."""
        created = await tx.users.create(user)
        await self._otps.put(otp, self._otp_ttl)
        logger.info("user saved", extra={"user_id": created.id})
        return created

    async def update(
        self,
        tx: UnitOfWorkPort,
        user: User,
        *,
        previous_email: str | None = None,
    ) -> User:
        saved = await tx.users.save(user)
        if saved is None:
            raise UserNotFound()

        drop: tuple[str, ...] = ()
        if previous_email and normalize_email(previous_email) != saved.email:
            drop = (cache_key_by_email(previous_email),)
        await self._write_through(saved, drop=drop)
        return saved

    async def delete(self, tx: UnitOfWorkPort, user: User) -> None:
        # a failing store delete raises here, before anything is evicted
        deleted = await tx.users.delete(user.id)
        await self.evict(user)
        if not deleted:
            raise UserNotFound()

    async def evict(self, user: User) -> None:
        await self._evict_keys(cache_key_by_id(user.id), cache_key_by_email(user.email))

    async def _evict_keys(self, *keys: str) -> None:
        try:
            await self._cache.delete(*keys)
        except Exception:  # noqa: BLE001
            logger.error(
                "user cache eviction failed",
                extra={"keys": list(keys)},
                exc_info=True,
            )

    async def _write_through(self, user: User, *, drop: tuple[str, ...] = ()) -> None:
        data = serialize_user(user)
        entries = {
            cache_key_by_id(user.id): data,
            cache_key_by_email(user.email): data,
        }
        try:
            await self._cache.set_many(entries, self._cache_ttl, drop=drop)
        except Exception:  # noqa: BLE001
            logger.warning(
                "user cache write failed; evicting",
                extra={"user_id": user.id},
                exc_info=True,
            )
            await self.evict(user)

    # -- OTP lifecycle ------------------------------------------------------

    async def find_otp(self, email: str, code: str) -> Otp:
        otp = await self._otps.get(normalize_email(email))
        if otp is None:
            raise OtpNotFound()
        if not otp.matches(code):
            raise WrongOtp()
        return otp

    async def update_status_email(self, tx: UnitOfWorkPort, otp: Otp) -> User:
        user = await tx.users.set_active(otp.email)
        if user is None:
            raise UserNotFound()
        await self._write_through(user)
        return user

    async def del_otp(self, otp: Otp) -> None:
        if not await self._otps.consume(otp):
            # a concurrent verification got there first
            raise OtpNotFound()

    async def restore_otp(self, otp: Otp) -> None:
        try:
            await self._otps.put(otp, self._otp_ttl)
        except Exception:  # noqa: BLE001
            logger.error("otp restore failed", extra={"email": otp.email}, exc_info=True)

    async def discard_otp(self, email: str) -> None:
        try:
            await self._otps.delete(normalize_email(email))
        except Exception:  # noqa: BLE001
            logger.warning("otp cleanup failed", extra={"email": email}, exc_info=True)

    async def get_new_otp(self, otp: Otp) -> None:
        await self._otps.put(otp, self._otp_ttl)
