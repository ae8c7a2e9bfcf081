from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from trustseal.models.credential import Credential


class DuplicateCredentialError(Exception):
    """Another credential already holds this external credential_id."""

    def __init__(self, credential_id: str) -> None:
        super().__init__(f"credential_id already exists: {credential_id}")
        self.credential_id = credential_id


class CredentialRepo(Protocol):
    async def get_by_id(self, id: UUID) -> Credential | None: ...
    async def get_by_credential_id(self, credential_id: str) -> Credential | None: ...
    async def list_by_student_ref(self, student_ref: str) -> list[Credential]: ...
    async def list_by_issuer(self, issuer_id: UUID) -> list[Credential]: ...
    async def list_by_institution(self, institution: str) -> list[Credential]: ...
    async def list_by_status(self, status: str) -> list[Credential]: ...
    async def list_by_degree(self, degree: str) -> list[Credential]: ...
    async def list_all(self) -> list[Credential]: ...
    async def save(self, credential: Credential) -> Credential: ...


class InMemoryCredentialRepo:
    def __init__(self) -> None:
        self._by_id: dict[UUID, Credential] = {}
        self._by_credential_id: dict[str, Credential] = {}

    async def get_by_id(self, id: UUID) -> Credential | None:
        return self._by_id.get(id)

    async def get_by_credential_id(self, credential_id: str) -> Credential | None:
        return self._by_credential_id.get(credential_id)

    async def list_by_student_ref(self, student_ref: str) -> list[Credential]:
        return [c for c in self._by_id.values() if c.student_ref == student_ref]

    async def list_by_issuer(self, issuer_id: UUID) -> list[Credential]:
        return [c for c in self._by_id.values() if c.issuer_id == issuer_id]

    async def list_by_institution(self, institution: str) -> list[Credential]:
        return [c for c in self._by_id.values() if c.institution == institution]

    async def list_by_status(self, status: str) -> list[Credential]:
        return [c for c in self._by_id.values() if c.status == status]

    async def list_by_degree(self, degree: str) -> list[Credential]:
        return [c for c in self._by_id.values() if c.degree == degree]

    async def list_all(self) -> list[Credential]:
        return list(self._by_id.values())

    async def save(self, credential: Credential) -> Credential:
        """Insert, or re-save an existing record (same id) bumping updated_at."""
        now = datetime.now(UTC)
        holder = self._by_credential_id.get(credential.credential_id)
        if holder is not None and holder.id != credential.id:
            raise DuplicateCredentialError(credential.credential_id)

        existing = self._by_id.get(credential.id)
        if existing is None:
            stored = replace(credential, created_at=now, updated_at=now)
        else:
            if existing.credential_id != credential.credential_id:
                raise ValueError("credential_id is immutable once set")
            stored = replace(credential, created_at=existing.created_at, updated_at=now)

        self._by_id[stored.id] = stored
        self._by_credential_id[stored.credential_id] = stored
        return stored
