from dataclasses import dataclass, field, replace
from typing import Any

from accounts.domain.entities import Otp, User
from accounts.domain.errors import EmailAlreadyUsed


@dataclass
class FakeDatabase:
    """Committed state shared by every FakeUoW opened on it."""

    rows: dict[int, User] = field(default_factory=dict)
    next_id: int = 1
    reads: int = 0

    def seed(self, **fields) -> User:
        user = User(id=self.next_id, **fields)
        self.rows[user.id] = user
        self.next_id += 1
        return replace(user)


class FakeUserRepo:
    def __init__(self, db: FakeDatabase):
        self._db = db
        self.rows = {k: replace(v) for k, v in db.rows.items()}
        self.next_id = db.next_id
        self.fail_delete = False

    def _by_email(self, email: str) -> User | None:
        email = email.strip().lower()
        return next((u for u in self.rows.values() if u.email == email), None)

    async def create(self, user: User) -> User:
        if self._by_email(user.email):
            raise EmailAlreadyUsed()
        created = replace(user, id=self.next_id)
        self.rows[created.id] = created
        self.next_id += 1
        return replace(created)

    async def save(self, user: User) -> User | None:
        if user.id not in self.rows:
            return None
        other = self._by_email(user.email)
        if other and other.id != user.id:
            raise EmailAlreadyUsed()
        self.rows[user.id] = replace(user)
        return replace(user)

    async def delete(self, user_id: int) -> bool:
        if self.fail_delete:
            raise RuntimeError("db down")
        return self.rows.pop(user_id, None) is not None

    async def find_by_id(self, user_id: int) -> User | None:
        self._db.reads += 1
        found = self.rows.get(user_id)
        return replace(found) if found else None

    async def find_by_id_for_update(self, user_id: int) -> User | None:
        return await self.find_by_id(user_id)

    async def find_by_email(self, email: str) -> User | None:
        self._db.reads += 1
        found = self._by_email(email)
        return replace(found) if found else None

    async def find_all(self) -> list[User]:
        self._db.reads += 1
        return [replace(self.rows[k]) for k in sorted(self.rows)]

    async def set_active(self, email: str) -> User | None:
        found = self._by_email(email)
        if not found:
            return None
        found.is_active = True
        return replace(found)


class FakeUoW:
    """Stages changes on a copy of the database; commit() publishes them."""

    def __init__(self, db: FakeDatabase | None = None, *, fail_commit: bool = False):
        self.db = db or FakeDatabase()
        self.fail_commit = fail_commit
        self.users = FakeUserRepo(self.db)
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self):
        self.users = FakeUserRepo(self.db)
        self.committed = False
        self.rolled_back = False
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc or not self.committed:
            self.rolled_back = True

    async def commit(self) -> None:
        if self.fail_commit:
            raise RuntimeError("commit failed")
        self.db.rows = {k: replace(v) for k, v in self.users.rows.items()}
        self.db.next_id = self.users.next_id
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


class FakeUserCache:
    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail_writes = False
        self.fail_deletes = False

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set_many(self, entries, ttl_seconds=None, *, drop=()) -> None:
        if self.fail_writes:
            raise ConnectionError("redis down")
        for key in drop:
            self.data.pop(key, None)
        for key, value in entries.items():
            self.data[key] = value
            self.ttls[key] = ttl_seconds

    async def populate(self, entries, ttl_seconds=None) -> None:
        if self.fail_writes:
            raise ConnectionError("redis down")
        for key, value in entries.items():
            if key not in self.data:
                self.data[key] = value
                self.ttls[key] = ttl_seconds

    async def delete(self, *keys: str) -> None:
        if self.fail_deletes:
            raise ConnectionError("redis down")
        for key in keys:
            self.data.pop(key, None)


class FakeOtpStore:
    def __init__(self):
        self.records: dict[str, Otp] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail_put = False

    async def get(self, email: str) -> Otp | None:
        return self.records.get(email)

    async def put(self, otp: Otp, ttl_seconds: int | None = None) -> None:
        if self.fail_put:
            raise ConnectionError("redis down")
        self.records[otp.email] = otp
        self.ttls[otp.email] = ttl_seconds

    async def consume(self, otp: Otp) -> bool:
        if self.records.get(otp.email) != otp:
            return False
        del self.records[otp.email]
        return True

    async def delete(self, email: str) -> None:
        self.records.pop(email, None)


class FakeNotifier:
    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def send_otp(self, email: str, code: str) -> None:
        self.sent.append((email, code))


class FakeEmailOK:
    def __init__(self):
        self.calls: list[dict[str, Any]] = []

    async def send(
        self, *, to: str, subject: str, body: str, idempotency_key=None
    ) -> None:
        self.calls.append(
            {
                "to": to,
                "subject": subject,
                "body": body,
                "idempotency_key": idempotency_key,
            }
        )


class FakeEmailFailing:
    def __init__(self):
        self.calls: int = 0

    async def send(
        self, *, to: str, subject: str, body: str, idempotency_key=None
    ) -> None:
        self.calls += 1
        raise RuntimeError("smtp down")
