from __future__ import annotations

from typing import Optional, Protocol


class UserCachePort(Protocol):
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None on a miss ("" is a real value)."""

    async def set_many(
        self,
        entries: dict[str, str],
        ttl_seconds: int | None = None,
        *,
        drop: tuple[str, ...] = (),
    ) -> None:
        """
        Write every entry (and delete every key in `drop`) as one atomic step.
        ttl_seconds of None or 0 means no deadline.
        """

    async def populate(
        self,
        entries: dict[str, str],
        ttl_seconds: int | None = None,
    ) -> None:
        """
        Like set_many, but only writes keys that are currently absent (SET NX).
        Used after a store read, so it never overwrites a newer write-through.
        """

    async def delete(self, *keys: str) -> None:
        """Delete the keys together; missing keys are ignored."""
