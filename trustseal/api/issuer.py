"""Issuer endpoints.

- POST /api/issuer/credentials        - issue a credential (synchronous)
- GET  /api/issuer/credentials        - credentials issued by the caller
- GET  /api/issuer/credentials/{id}   - one credential

The issuer is always the authenticated caller.  Issuance waits for the
proof worker and returns the persisted record, or an error envelope
when any step fails (see the exception handlers in main.py).
"""

from __future__ import annotations

import datetime
import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import ConfigDict, Field

from trustseal.api.credentials import (
    CamelModel,
    CredentialEnvelope,
    CredentialListEnvelope,
    CredentialOut,
)
from trustseal.api.dependencies import (
    get_credential_lookup,
    get_identity_registry,
    get_issuance_orchestrator,
    require_user,
)
from trustseal.models.credential import IssuanceRequest
from trustseal.models.principal import Principal
from trustseal.services.credential_lookup import CredentialLookup
from trustseal.services.identity_registry import IdentityRegistry
from trustseal.services.issuance import IssuanceOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/issuer", tags=["issuer"])

_Required = Annotated[str, Field(min_length=1, max_length=255)]


class IssueCredentialIn(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    student_name: _Required
    degree: _Required
    institution: _Required
    issue_date: datetime.date
    student_id: Annotated[str, Field(min_length=1, max_length=128)]
    student_email: Annotated[str, Field(min_length=3, max_length=320, pattern=r"^\S+@\S+$")]

    def to_request(self) -> IssuanceRequest:
        return IssuanceRequest(
            student_name=self.student_name,
            degree=self.degree,
            institution=self.institution,
            issue_date=self.issue_date,
            student_id=self.student_id,
            student_email=self.student_email,
        )


class IssueCredentialOut(CamelModel):
    success: bool = True
    message: str = "Credential issued successfully"
    credential_id: str
    credential: CredentialOut


@router.post(
    "/credentials",
    response_model=IssueCredentialOut,
    status_code=status.HTTP_201_CREATED,
)
async def issue_credential(
    body: IssueCredentialIn,
    principal: Annotated[Principal, Depends(require_user)],
    orchestrator: Annotated[IssuanceOrchestrator, Depends(get_issuance_orchestrator)],
) -> IssueCredentialOut:
    logger.info(
        "Issuance requested by user=%s for student_id=%s",
        principal.user_id,
        body.student_id,
    )
    credential = await orchestrator.issue(body.to_request(), principal)
    return IssueCredentialOut(
        credential_id=credential.credential_id,
        credential=CredentialOut.from_domain(credential),
    )


@router.get("/credentials", response_model=CredentialListEnvelope)
async def list_issued_credentials(
    principal: Annotated[Principal, Depends(require_user)],
    registry: Annotated[IdentityRegistry, Depends(get_identity_registry)],
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
    institution: Annotated[str | None, Query()] = None,
) -> CredentialListEnvelope:
    issuer = await registry.resolve_issuer(principal.user_id)
    issued = await lookup.list_for_issuer(issuer.id, institution=institution)
    return CredentialListEnvelope.of(issued)


@router.get("/credentials/{id}", response_model=CredentialEnvelope)
async def get_issued_credential(
    id: UUID,
    _principal: Annotated[Principal, Depends(require_user)],
    lookup: Annotated[CredentialLookup, Depends(get_credential_lookup)],
) -> CredentialEnvelope:
    credential = await lookup.get(id)
    return CredentialEnvelope(credential=CredentialOut.from_domain(credential))
