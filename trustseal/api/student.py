"""Student (holder) endpoints.

- GET  /api/student/credentials?studentId=   - credentials held by a student
- GET  /api/student/credentials/{id}         - one credential
- POST /api/student/credentials/{id}/proof   - re-present the stored proof
- GET  /api/student/profile?studentId=       - student record + credential count
"""

from __future__ import annotations

import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from trustseal.api.credentials import (
    CamelModel,
    CredentialEnvelope,
    CredentialListEnvelope,
    CredentialOut,
)
from trustseal.api.dependencies import get_credential_lookup
from trustseal.services.credential_lookup import CredentialLookup, StudentProfile

router = APIRouter(prefix="/api/student", tags=["student"])

_StudentIdQuery = Annotated[str, Query(alias="studentId", min_length=1)]


class StudentCredentialsOut(CredentialListEnvelope):
    student_id: str


class ProofOut(CamelModel):
    success: bool = True
    credential_id: str
    proof: str
    qr_code: str
    message: str = "Proof generated successfully"


class ProfileOut(CamelModel):
    id: UUID
    student_id: str | None
    full_name: str
    email: str
    institution: str
    credential_count: int
    created_at: datetime.datetime | None

    @classmethod
    def from_domain(cls, p: StudentProfile) -> ProfileOut:
        return cls(
            id=p.student.id,
            student_id=p.student.student_id,
            full_name=p.student.full_name,
            email=p.student.email,
            institution=p.student.institution,
            credential_count=p.credential_count,
            created_at=p.student.created_at,
        )


class ProfileEnvelope(CamelModel):
    success: bool = True
    profile: ProfileOut


@router.get("/credentials", response_model=StudentCredentialsOut)
async def list_student_credentials(
    student_id: _StudentIdQuery,
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
) -> StudentCredentialsOut:
    held = await lookup.list_for_student(student_id)
    return StudentCredentialsOut(
        credentials=[CredentialOut.from_domain(c) for c in held],
        count=len(held),
        student_id=student_id,
    )


@router.get("/credentials/{id}", response_model=CredentialEnvelope)
async def get_student_credential(
    id: UUID,
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
) -> CredentialEnvelope:
    credential = await lookup.get(id)
    return CredentialEnvelope(credential=CredentialOut.from_domain(credential))


@router.post("/credentials/{id}/proof", response_model=ProofOut)
async def present_proof(
    id: UUID,
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
) -> ProofOut:
    bundle = await lookup.proof_bundle(id)
    return ProofOut(
        credential_id=bundle.credential_id,
        proof=bundle.proof,
        qr_code=bundle.qr_code,
    )


@router.get("/profile", response_model=ProfileEnvelope)
async def get_profile(
    student_id: _StudentIdQuery,
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
) -> ProfileEnvelope:
    profile = await lookup.student_profile(student_id)
    return ProfileEnvelope(profile=ProfileOut.from_domain(profile))
