from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal
from uuid import UUID, uuid4

CredentialStatus = Literal["ISSUED", "REVOKED", "EXPIRED"]

# Only ISSUED is ever assigned; REVOKED/EXPIRED exist in the schema but
# no code path transitions a credential into them.
STATUS_ISSUED: CredentialStatus = "ISSUED"
STATUS_REVOKED: CredentialStatus = "REVOKED"
STATUS_EXPIRED: CredentialStatus = "EXPIRED"


@dataclass(frozen=True, slots=True)
class Credential:
    """One issued claim backed by a proof from the proof worker.

    student_id/issuer_id reference User.id.  The student's own
    institution-assigned identifier is carried as student_ref so that
    holder lookups don't need a join.
    """

    id: UUID
    credential_id: str  # external, assigned by the proof worker
    student_id: UUID
    student_ref: str
    issuer_id: UUID
    degree: str
    institution: str
    issue_date: date
    status: CredentialStatus
    proof_data: str
    qr_code_data: str
    created_at: datetime | None = None  # stamped by the repo on save
    updated_at: datetime | None = None

    @staticmethod
    def new(
        *,
        credential_id: str,
        student_id: UUID,
        student_ref: str,
        issuer_id: UUID,
        degree: str,
        institution: str,
        issue_date: date,
        proof_data: str,
        qr_code_data: str,
    ) -> Credential:
        return Credential(
            id=uuid4(),
            credential_id=credential_id,
            student_id=student_id,
            student_ref=student_ref,
            issuer_id=issuer_id,
            degree=degree,
            institution=institution,
            issue_date=issue_date,
            status=STATUS_ISSUED,
            proof_data=proof_data,
            qr_code_data=qr_code_data,
        )


@dataclass(frozen=True, slots=True)
class IssuanceRequest:
    """Pre-validated issuer input for one credential."""

    student_name: str
    degree: str
    institution: str
    issue_date: date
    student_id: str
    student_email: str
