from __future__ import annotations

import logging

from trustseal.core.metrics import ISSUANCES
from trustseal.models.credential import Credential, IssuanceRequest
from trustseal.models.principal import Principal
from trustseal.repos.credential_repo import CredentialRepo, DuplicateCredentialError
from trustseal.services.errors import ConflictError, NotFoundError, WorkerError
from trustseal.services.identity_registry import IdentityRegistry
from trustseal.services.proof_worker import IssuanceClaim, ProofWorkerGateway

logger = logging.getLogger(__name__)


class IssuanceOrchestrator:
    """Issues one credential per call.

    Steps run strictly in order, each depending on the previous one:
      1. resolve the issuer from the authenticated caller
      2. resolve or create the student
      3. ask the proof worker for a proof
      4. persist the credential

    Nothing is written to the credential store unless step 3 succeeds.
    A student created in step 2 is kept on failure; re-running the same
    request resolves to that student again.
    """

    def __init__(
        self,
        registry: IdentityRegistry,
        proof_worker: ProofWorkerGateway,
        credentials: CredentialRepo,
    ) -> None:
        self._registry = registry
        self._worker = proof_worker
        self._credentials = credentials

    async def issue(self, request: IssuanceRequest, caller: Principal) -> Credential:
        try:
            issuer = await self._registry.resolve_issuer(caller.user_id)
        except NotFoundError:
            ISSUANCES.labels(result="not_found").inc()
            raise

        try:
            student = await self._registry.resolve_or_create_student(
                request.student_id,
                request.student_name,
                request.student_email,
                request.institution,
            )
        except ConflictError:
            ISSUANCES.labels(result="conflict").inc()
            raise

        claim = IssuanceClaim(
            student_name=request.student_name,
            degree=request.degree,
            institution=request.institution,
            issue_date=request.issue_date,
            student_id=request.student_id,
        )
        try:
            receipt = await self._worker.request_issuance(claim)
        except WorkerError as exc:
            ISSUANCES.labels(result="worker_error").inc()
            logger.warning(
                "Issuance aborted for student_id=%s: %s", request.student_id, exc
            )
            raise
        except Exception as exc:
            ISSUANCES.labels(result="worker_error").inc()
            logger.exception("Issuance aborted for student_id=%s", request.student_id)
            raise WorkerError(f"proof worker call failed: {exc}") from exc

        credential = Credential.new(
            credential_id=receipt.credential_id,
            student_id=student.id,
            student_ref=request.student_id,
            issuer_id=issuer.id,
            degree=request.degree,
            institution=request.institution,
            issue_date=request.issue_date,
            proof_data=receipt.proof,
            qr_code_data=receipt.qr_code,
        )
        try:
            saved = await self._credentials.save(credential)
        except DuplicateCredentialError as exc:
            ISSUANCES.labels(result="conflict").inc()
            logger.warning(
                "Duplicate external credential id rejected",
                extra={"credential_id": receipt.credential_id},
            )
            raise ConflictError(str(exc)) from exc

        ISSUANCES.labels(result="issued").inc()
        logger.info(
            "Issued credential %s degree=%r institution=%r issuer=%s",
            saved.id,
            saved.degree,
            saved.institution,
            issuer.id,
            extra={"credential_id": saved.credential_id, "user_id": str(issuer.id)},
        )
        return saved
