from __future__ import annotations

import asyncio
import uuid

import pytest

from trustseal.models.user import ROLE_ISSUER_ADMIN, ROLE_STUDENT, User
from trustseal.repos.user_repo import DuplicateUserError, InMemoryUserRepo
from trustseal.services.errors import ConflictError, NotFoundError
from trustseal.services.identity_registry import IdentityRegistry


def _issuer() -> User:
    return User.new(
        username="registrar@uni.edu",
        email="registrar@uni.edu",
        full_name="Registrar",
        role=ROLE_ISSUER_ADMIN,
        institution="Uni",
    )


def test_resolve_issuer_returns_stored_user() -> None:
    repo = InMemoryUserRepo()
    issuer = asyncio.run(repo.add(_issuer()))
    registry = IdentityRegistry(repo)

    assert asyncio.run(registry.resolve_issuer(issuer.id)) == issuer
    assert asyncio.run(registry.resolve_issuer(str(issuer.id))) == issuer


def test_resolve_issuer_unknown_id_raises_not_found() -> None:
    registry = IdentityRegistry(InMemoryUserRepo())
    with pytest.raises(NotFoundError, match="issuer not found"):
        asyncio.run(registry.resolve_issuer(uuid.uuid4()))


def test_resolve_issuer_malformed_id_raises_not_found() -> None:
    registry = IdentityRegistry(InMemoryUserRepo())
    with pytest.raises(NotFoundError):
        asyncio.run(registry.resolve_issuer("not-a-uuid"))


def test_resolve_or_create_student_creates_once() -> None:
    repo = InMemoryUserRepo()
    registry = IdentityRegistry(repo)

    first = asyncio.run(
        registry.resolve_or_create_student("S-1", "Ada", "ada@uni.edu", "Uni")
    )
    second = asyncio.run(
        registry.resolve_or_create_student("S-1", "Ada", "ada@uni.edu", "Uni")
    )

    assert first.id == second.id
    assert first.role == ROLE_STUDENT
    assert first.username == "ada@uni.edu"
    assert len(repo._by_id) == 1


def test_existing_student_is_returned_unchanged() -> None:
    repo = InMemoryUserRepo()
    registry = IdentityRegistry(repo)
    original = asyncio.run(
        registry.resolve_or_create_student("S-1", "Ada", "ada@uni.edu", "Uni")
    )

    again = asyncio.run(
        registry.resolve_or_create_student("S-1", "Someone Else", "other@uni.edu", "Other")
    )

    assert again == original
    assert again.full_name == "Ada"


class _RacingRepo(InMemoryUserRepo):
    """Simulates another request inserting the same student first."""

    def __init__(self, winner: User | None) -> None:
        super().__init__()
        self._winner = winner

    async def add(self, user: User) -> User:
        if self._winner is not None:
            await super().add(self._winner)
        raise DuplicateUserError("student_id", user.student_id or "")


def test_lost_create_race_resolves_to_winner() -> None:
    winner = User.new_student(
        student_id="S-9", full_name="Grace", email="grace@uni.edu", institution="Uni"
    )
    registry = IdentityRegistry(_RacingRepo(winner))

    resolved = asyncio.run(
        registry.resolve_or_create_student("S-9", "Grace", "grace@uni.edu", "Uni")
    )

    assert resolved.id == winner.id


def test_username_collision_without_student_raises_conflict() -> None:
    registry = IdentityRegistry(_RacingRepo(None))
    with pytest.raises(ConflictError, match="already in use"):
        asyncio.run(
            registry.resolve_or_create_student("S-2", "Ada", "ada@uni.edu", "Uni")
        )


def test_get_student_unknown_raises_not_found() -> None:
    registry = IdentityRegistry(InMemoryUserRepo())
    with pytest.raises(NotFoundError, match="student not found: S-404"):
        asyncio.run(registry.get_student("S-404"))
