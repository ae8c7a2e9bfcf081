from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID, uuid4

UserRole = Literal["STUDENT", "ISSUER_ADMIN", "VERIFIER"]

ROLE_STUDENT: UserRole = "STUDENT"
ROLE_ISSUER_ADMIN: UserRole = "ISSUER_ADMIN"
ROLE_VERIFIER: UserRole = "VERIFIER"


@dataclass(frozen=True, slots=True)
class User:
    id: UUID
    username: str
    email: str
    full_name: str
    role: UserRole
    institution: str
    student_id: str | None = None  # set for STUDENT only, unique
    created_at: datetime | None = None  # stamped by the repo on add
    updated_at: datetime | None = None

    @staticmethod
    def new_student(
        *, student_id: str, full_name: str, email: str, institution: str
    ) -> User:
        # Students created implicitly by issuance log in with their email.
        return User(
            id=uuid4(),
            username=email,
            email=email,
            full_name=full_name,
            role=ROLE_STUDENT,
            institution=institution,
            student_id=student_id,
        )

    @staticmethod
    def new(
        *,
        username: str,
        email: str,
        full_name: str,
        role: UserRole,
        institution: str,
    ) -> User:
        return User(
            id=uuid4(),
            username=username,
            email=email,
            full_name=full_name,
            role=role,
            institution=institution,
        )
