"""PostgreSQL implementation of CredentialRepo."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trustseal.db.tables import CredentialRow
from trustseal.models.credential import Credential
from trustseal.repos.credential_repo import DuplicateCredentialError


class PgCredentialRepo:
    """Satisfies the CredentialRepo Protocol using PostgreSQL."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, id: UUID) -> Credential | None:
        row = await self._session.get(CredentialRow, id)
        if row is None:
            return None
        return _row_to_credential(row)

    async def get_by_credential_id(self, credential_id: str) -> Credential | None:
        stmt = select(CredentialRow).where(CredentialRow.credential_id == credential_id)
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_credential(row)

    async def list_by_student_ref(self, student_ref: str) -> list[Credential]:
        return await self._list(
            select(CredentialRow).where(CredentialRow.student_ref == student_ref)
        )

    async def list_by_issuer(self, issuer_id: UUID) -> list[Credential]:
        return await self._list(
            select(CredentialRow).where(CredentialRow.issuer_id == issuer_id)
        )

    async def list_by_institution(self, institution: str) -> list[Credential]:
        return await self._list(
            select(CredentialRow).where(CredentialRow.institution == institution)
        )

    async def list_by_status(self, status: str) -> list[Credential]:
        return await self._list(
            select(CredentialRow).where(CredentialRow.status == status)
        )

    async def list_by_degree(self, degree: str) -> list[Credential]:
        return await self._list(
            select(CredentialRow).where(CredentialRow.degree == degree)
        )

    async def list_all(self) -> list[Credential]:
        return await self._list(select(CredentialRow))

    async def save(self, credential: Credential) -> Credential:
        """Insert, or re-save an existing record (same id) bumping updated_at."""
        now = datetime.now(UTC)
        row = await self._session.get(CredentialRow, credential.id)
        if row is None:
            row = CredentialRow(
                id=credential.id,
                credential_id=credential.credential_id,
                created_at=now,
            )
        elif row.credential_id != credential.credential_id:
            raise ValueError("credential_id is immutable once set")

        row.student_id = credential.student_id
        row.student_ref = credential.student_ref
        row.issuer_id = credential.issuer_id
        row.degree = credential.degree
        row.institution = credential.institution
        row.issue_date = credential.issue_date
        row.status = credential.status
        row.proof_data = credential.proof_data
        row.qr_code_data = credential.qr_code_data
        row.updated_at = now

        try:
            # Savepoint so a unique violation leaves the outer
            # transaction usable for the error response.
            async with self._session.begin_nested():
                self._session.add(row)
                await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateCredentialError(credential.credential_id) from exc
        return _row_to_credential(row)

    async def _list(self, stmt: Select[tuple[CredentialRow]]) -> list[Credential]:
        stmt = stmt.order_by(CredentialRow.created_at)
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_credential(r) for r in rows]


def _row_to_credential(row: CredentialRow) -> Credential:
    return Credential(
        id=row.id,
        credential_id=row.credential_id,
        student_id=row.student_id,
        student_ref=row.student_ref,
        issuer_id=row.issuer_id,
        degree=row.degree,
        institution=row.institution,
        issue_date=row.issue_date,
        status=row.status,  # type: ignore[arg-type]
        proof_data=row.proof_data,
        qr_code_data=row.qr_code_data,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
