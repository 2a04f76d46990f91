from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis

from accounts.domain.entities import Otp
from accounts.domain.ports.otp_store import OtpStorePort


_LUA_CONSUME = """
-- KEYS[1]: otp key
-- ARGV[1]: expected digest (base64)
local key = KEYS[1]
local expected = ARGV[1]
local cur = redis.call('HGET', key, 'digest')
if not cur then
  return 0
end
if cur ~= expected then
  return 0
end
redis.call('DEL', key)
return 1
"""


class RedisOtpStore(OtpStorePort):
    """OTP records as Redis hashes {salt, digest}, one per email."""

    def __init__(self, redis: Redis, *, key_prefix: str = "otp:") -> None:
        self._redis = redis
        self._prefix = key_prefix

    def _key(self, email: str) -> str:
        return f"{self._prefix}{email}"

    async def get(self, email: str) -> Optional[Otp]:
        stored = await self._redis.hgetall(self._key(email))
        if not stored or "salt" not in stored or "digest" not in stored:
            return None
        return Otp(email=email, salt_b64=stored["salt"], digest_b64=stored["digest"])

    async def put(self, otp: Otp, ttl_seconds: int | None = None) -> None:
        key = self._key(otp.email)
        pipe = self._redis.pipeline(transaction=True)
        # replace, never merge with a previous code
        pipe.delete(key)
        pipe.hset(key, mapping={"salt": otp.salt_b64, "digest": otp.digest_b64})
        if ttl_seconds:
            pipe.expire(key, ttl_seconds)
        await pipe.execute()

    async def consume(self, otp: Otp) -> bool:
        # atomic compare-and-delete
        res = await self._redis.eval(_LUA_CONSUME, 1, self._key(otp.email), otp.digest_b64)
        return int(res) == 1

    async def delete(self, email: str) -> None:
        await self._redis.delete(self._key(email))
