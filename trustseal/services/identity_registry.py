from __future__ import annotations

import logging
from uuid import UUID

from trustseal.models.user import User
from trustseal.repos.user_repo import DuplicateUserError, UserRepo
from trustseal.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """Resolves issuers and students to User records.

    Students are get-or-create keyed on their institution-assigned
    student_id.  Concurrent creators are arbitrated by the store's unique
    constraint; the loser re-reads instead of failing.
    """

    def __init__(self, user_repo: UserRepo) -> None:
        self._users = user_repo

    async def resolve_issuer(self, issuer_id: UUID | str) -> User:
        if not isinstance(issuer_id, UUID):
            try:
                issuer_id = UUID(issuer_id)
            except ValueError:
                raise NotFoundError("issuer", issuer_id) from None

        issuer = await self._users.get_by_id(issuer_id)
        if issuer is None:
            logger.warning("Issuer lookup failed issuer_id=%s", issuer_id)
            raise NotFoundError("issuer", issuer_id)
        return issuer

    async def get_student(self, student_id: str) -> User:
        student = await self._users.get_by_student_id(student_id)
        if student is None:
            raise NotFoundError("student", student_id)
        return student

    async def resolve_or_create_student(
        self,
        student_id: str,
        display_name: str,
        email: str,
        institution: str,
    ) -> User:
        # An existing record wins as-is, even if the supplied fields differ.
        existing = await self._users.get_by_student_id(student_id)
        if existing is not None:
            return existing

        candidate = User.new_student(
            student_id=student_id,
            full_name=display_name,
            email=email,
            institution=institution,
        )
        try:
            created = await self._users.add(candidate)
        except DuplicateUserError as exc:
            winner = await self._users.get_by_student_id(student_id)
            if winner is not None:
                logger.info(
                    "Student create lost race, reusing student_id=%s", student_id
                )
                return winner
            logger.warning(
                "Student create rejected student_id=%s: %s", student_id, exc
            )
            raise ConflictError(
                f"cannot create student {student_id}: {exc.field} already in use"
            ) from exc

        logger.info("Created student user_id=%s student_id=%s", created.id, student_id)
        return created
