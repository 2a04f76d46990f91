from __future__ import annotations

from typing import Optional, Protocol

from accounts.domain.entities import Otp


class OtpStorePort(Protocol):
    async def get(self, email: str) -> Optional[Otp]:
        """Return the outstanding record, or None if there is none."""

    async def put(self, otp: Otp, ttl_seconds: int | None = None) -> None:
        """Store/replace the record for otp.email. ttl_seconds 0/None: no expiry."""

    async def consume(self, otp: Otp) -> bool:
        """
        Delete the record only if it is still exactly `otp` (compare-and-delete).
        True if this call removed it.
        """

    async def delete(self, email: str) -> None:
        """Drop any record for the email."""
