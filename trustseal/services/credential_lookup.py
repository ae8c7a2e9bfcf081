from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from trustseal.models.credential import Credential
from trustseal.models.user import User
from trustseal.repos.credential_repo import CredentialRepo
from trustseal.services.errors import NotFoundError
from trustseal.services.identity_registry import IdentityRegistry


@dataclass(frozen=True, slots=True)
class ProofBundle:
    credential_id: str
    proof: str
    qr_code: str


@dataclass(frozen=True, slots=True)
class StudentProfile:
    student: User
    credential_count: int


class CredentialLookup:
    """Read-only access to issued credentials for issuers and holders."""

    def __init__(self, credentials: CredentialRepo, registry: IdentityRegistry) -> None:
        self._credentials = credentials
        self._registry = registry

    async def get(self, id: UUID) -> Credential:
        credential = await self._credentials.get_by_id(id)
        if credential is None:
            raise NotFoundError("credential", id)
        return credential

    async def list_for_student(self, student_id: str) -> list[Credential]:
        return await self._credentials.list_by_student_ref(student_id)

    async def list_for_institution(self, institution: str) -> list[Credential]:
        return await self._credentials.list_by_institution(institution)

    async def list_for_issuer(
        self, issuer_id: UUID, *, institution: str | None = None
    ) -> list[Credential]:
        issued = await self._credentials.list_by_issuer(issuer_id)
        if institution is not None:
            issued = [c for c in issued if c.institution == institution]
        return issued

    async def search(
        self,
        *,
        institution: str | None = None,
        status: str | None = None,
        degree: str | None = None,
    ) -> list[Credential]:
        """AND of the given filters; every credential when none is given."""
        if institution is not None:
            found = await self.list_for_institution(institution)
        elif status is not None:
            found = await self._credentials.list_by_status(status)
        elif degree is not None:
            found = await self._credentials.list_by_degree(degree)
        else:
            return await self._credentials.list_all()

        return [
            c
            for c in found
            if (status is None or c.status == status)
            and (degree is None or c.degree == degree)
        ]

    async def proof_bundle(self, id: UUID) -> ProofBundle:
        # Proofs are generated once, at issuance; the holder re-presents it.
        credential = await self.get(id)
        return ProofBundle(
            credential_id=credential.credential_id,
            proof=credential.proof_data,
            qr_code=credential.qr_code_data,
        )

    async def student_profile(self, student_id: str) -> StudentProfile:
        student = await self._registry.get_student(student_id)
        credentials = await self._credentials.list_by_student_ref(student_id)
        return StudentProfile(student=student, credential_count=len(credentials))
