"""PostgreSQL implementation of UserRepo."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trustseal.db.tables import UserRow
from trustseal.models.user import User
from trustseal.repos.user_repo import DuplicateUserError


class PgUserRepo:
    """Satisfies the UserRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        stmt = select(UserRow).where(UserRow.id == user_id)
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_user(row)

    async def get_by_student_id(self, student_id: str) -> User | None:
        stmt = select(UserRow).where(UserRow.student_id == student_id)
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_user(row)

    async def add(self, user: User) -> User:
        """Insert and commit.

        The commit is deliberate: a student created during issuance is
        kept even if the proof worker fails later in the same request.
        The unique constraints on username and student_id are the
        arbiter when two requests race to create the same student.
        """
        now = datetime.now(UTC)
        row = UserRow(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            institution=user.institution,
            student_id=user.student_id,
            created_at=now,
            updated_at=now,
        )
        self._session.add(row)
        try:
            await self._session.flush()
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            if "student_id" in str(exc.orig):
                raise DuplicateUserError("student_id", user.student_id or "") from exc
            raise DuplicateUserError("username", user.username) from exc
        return _row_to_user(row)


def _row_to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        full_name=row.full_name,
        role=row.role,  # type: ignore[arg-type]
        institution=row.institution,
        student_id=row.student_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
