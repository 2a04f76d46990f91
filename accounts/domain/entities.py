from __future__ import annotations

from dataclasses import dataclass

from accounts.domain import services as domain_services


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass
class User:
    id: int | None = None
    email: str | None = None
    first_name: str = ""
    last_name: str = ""
    bio: str = ""
    password_hash: str = ""
    is_active: bool = False

    def __post_init__(self):
        if self.email:
            self.email = normalize_email(self.email)
            if not self.email:
                raise ValueError("email cannot be empty")
        else:
            raise ValueError("email is required")


@dataclass(frozen=True)
class Otp:
    """
    One outstanding verification code for a pending user.

    Only the salted digest is kept; the plaintext code goes out through the
    notifier and comes back from the client.
    """

    email: str
    salt_b64: str
    digest_b64: str

    @classmethod
    def issue(cls, email: str, code: str) -> "Otp":
        salt_b64, digest_b64 = domain_services.make_code_digest(code)
        return cls(email=normalize_email(email), salt_b64=salt_b64, digest_b64=digest_b64)

    def matches(self, code: str) -> bool:
        return domain_services.verify_code_digest(code, self.salt_b64, self.digest_b64)
