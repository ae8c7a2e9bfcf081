from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from trustseal.models.user import User


class DuplicateUserError(Exception):
    """A unique field (username or student_id) is already taken."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field} already exists: {value}")
        self.field = field
        self.value = value


class UserRepo(Protocol):
    async def get_by_id(self, user_id: UUID) -> User | None: ...
    async def get_by_student_id(self, student_id: str) -> User | None: ...
    async def add(self, user: User) -> User: ...


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._by_id: dict[UUID, User] = {}
        self._by_username: dict[str, User] = {}
        self._by_student_id: dict[str, User] = {}

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self._by_id.get(user_id)

    async def get_by_student_id(self, student_id: str) -> User | None:
        return self._by_student_id.get(student_id)

    async def add(self, user: User) -> User:
        # Mirrors the unique constraints on the users table.
        if user.username in self._by_username:
            raise DuplicateUserError("username", user.username)
        if user.student_id is not None and user.student_id in self._by_student_id:
            raise DuplicateUserError("student_id", user.student_id)

        now = datetime.now(UTC)
        stored = replace(user, created_at=now, updated_at=now)
        self._by_id[stored.id] = stored
        self._by_username[stored.username] = stored
        if stored.student_id is not None:
            self._by_student_id[stored.student_id] = stored
        return stored
