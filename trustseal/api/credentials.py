"""Credential read endpoints shared by all roles.

- GET /api/credentials/{id}                  - one credential by internal id
- GET /api/credentials?institution=|status=|degree=
                                             - query by field, all if no filter

Also home of the response schemas the issuer and student routers reuse.
Field names are camelCase on the wire.
"""

from __future__ import annotations

import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from trustseal.api.dependencies import get_credential_lookup
from trustseal.models.credential import Credential, CredentialStatus
from trustseal.services.credential_lookup import CredentialLookup

router = APIRouter(prefix="/api/credentials", tags=["credentials"])


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CredentialOut(CamelModel):
    id: UUID
    credential_id: str
    student_id: str
    student_user_id: UUID
    issuer_id: UUID
    degree: str
    institution: str
    issue_date: datetime.date
    status: str
    proof_data: str
    qr_code_data: str
    created_at: datetime.datetime | None
    updated_at: datetime.datetime | None

    @classmethod
    def from_domain(cls, c: Credential) -> CredentialOut:
        return cls(
            id=c.id,
            credential_id=c.credential_id,
            student_id=c.student_ref,
            student_user_id=c.student_id,
            issuer_id=c.issuer_id,
            degree=c.degree,
            institution=c.institution,
            issue_date=c.issue_date,
            status=c.status,
            proof_data=c.proof_data,
            qr_code_data=c.qr_code_data,
            created_at=c.created_at,
            updated_at=c.updated_at,
        )


class CredentialEnvelope(CamelModel):
    success: bool = True
    credential: CredentialOut


class CredentialListEnvelope(CamelModel):
    success: bool = True
    credentials: list[CredentialOut]
    count: int

    @classmethod
    def of(cls, credentials: list[Credential]) -> CredentialListEnvelope:
        return cls(
            credentials=[CredentialOut.from_domain(c) for c in credentials],
            count=len(credentials),
        )


@router.get("", response_model=CredentialListEnvelope)
async def search_credentials(
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
    institution: Annotated[str | None, Query()] = None,
    status: Annotated[CredentialStatus | None, Query()] = None,
    degree: Annotated[str | None, Query()] = None,
) -> CredentialListEnvelope:
    found = await lookup.search(institution=institution, status=status, degree=degree)
    return CredentialListEnvelope.of(found)


@router.get("/{id}", response_model=CredentialEnvelope)
async def get_credential(
    id: UUID,
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
) -> CredentialEnvelope:
    credential = await lookup.get(id)
    return CredentialEnvelope(credential=CredentialOut.from_domain(credential))
