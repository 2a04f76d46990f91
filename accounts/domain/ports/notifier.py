from __future__ import annotations

from typing import Protocol


class NotifierPort(Protocol):
    def send_otp(self, email: str, code: str) -> None:
        """Dispatch the code to the user without waiting for delivery."""
