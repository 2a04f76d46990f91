from __future__ import annotations

import asyncio
import logging

from accounts.domain.ports.email_port import EmailPort
from accounts.domain.ports.notifier import NotifierPort

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Your verification code"


class OtpNotifier(NotifierPort):
    """
    Fire-and-forget delivery of verification codes.

    send_otp() schedules a task on the running loop and returns immediately.
    Failures are logged, never raised to the caller, and never retried.
    """

    def __init__(self, email: EmailPort, *, drain_timeout: float = 5.0) -> None:
        self._email = email
        self._drain_timeout = drain_timeout
        # strong refs so pending sends are not garbage-collected mid-flight
        self._tasks: set[asyncio.Task] = set()

    def send_otp(self, email: str, code: str) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(email, code))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def _deliver(self, email: str, code: str) -> None:
        try:
            await self._email.send(
                to=email,
                subject=OTP_SUBJECT,
                body=f"Your code is {code}",
            )
        except Exception:  # noqa: BLE001
            logger.warning("otp email not delivered", extra={"to": email}, exc_info=True)
        else:
            logger.info("otp email sent", extra={"to": email})

    async def aclose(self) -> None:
        """Give in-flight sends a bounded chance to finish, then cancel the rest."""
        if not self._tasks:
            return
        _, still_pending = await asyncio.wait(
            set(self._tasks), timeout=self._drain_timeout
        )
        for task in still_pending:
            task.cancel()
        if still_pending:
            logger.warning("dropped undelivered otp emails", extra={"count": len(still_pending)})
