"""Client for the external proof worker.

The worker owns all proof cryptography.  This module only speaks its
HTTP protocol:

  POST /issue   {studentName, degree, institution, issueDate, studentId}
                -> {success, credentialId, proof, qrCode}
  POST /verify  {proof, publicInputs} -> {isValid}
  GET  /health

Each call is awaited on an httpx.AsyncClient, so the calling request is
suspended until the worker answers or the transport gives up.  There is
no retry; the client timeout is the only deadline.

The two operations fail in opposite directions:

  request_issuance  raises WorkerError on anything unexpected, so the
                    orchestrator never persists a half-formed credential.
  verify_proof      returns False on anything unexpected.  An unreachable
                    worker must never read as "proof valid".
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

import httpx

from trustseal.core.config import SETTINGS
from trustseal.core.metrics import PROOF_WORKER_DURATION, PROOF_WORKER_FAILURES
from trustseal.services.errors import WorkerError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IssuanceClaim:
    student_name: str
    degree: str
    institution: str
    issue_date: date
    student_id: str

    def to_payload(self) -> dict[str, str]:
        return {
            "studentName": self.student_name,
            "degree": self.degree,
            "institution": self.institution,
            "issueDate": self.issue_date.isoformat(),
            "studentId": self.student_id,
        }


@dataclass(frozen=True, slots=True)
class IssuanceReceipt:
    credential_id: str
    proof: str
    qr_code: str


class ProofWorkerGateway(Protocol):
    async def request_issuance(self, claim: IssuanceClaim) -> IssuanceReceipt: ...
    async def verify_proof(self, proof: str, public_inputs: str) -> bool: ...
    async def ping(self) -> bool: ...


def _opaque_text(value: Any) -> str:
    # The worker returns the proof as a JSON object; store it as compact
    # JSON text so the holder can present exactly what was issued.
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


class HttpProofWorkerGateway:
    """ProofWorkerGateway over HTTP/JSON."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url, timeout=timeout
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request_issuance(self, claim: IssuanceClaim) -> IssuanceReceipt:
        body = await self._post_json("issue", "/issue", claim.to_payload())

        if body.get("success") is not True:
            PROOF_WORKER_FAILURES.labels(operation="issue", reason="rejected").inc()
            raise WorkerError(
                f"proof worker rejected issuance: {body.get('error') or 'success=false'}"
            )

        missing = [
            key
            for key in ("credentialId", "proof", "qrCode")
            if body.get(key) in (None, "")
        ]
        if missing:
            PROOF_WORKER_FAILURES.labels(operation="issue", reason="malformed").inc()
            raise WorkerError(
                f"proof worker response missing fields: {', '.join(missing)}"
            )

        return IssuanceReceipt(
            credential_id=str(body["credentialId"]),
            proof=_opaque_text(body["proof"]),
            qr_code=_opaque_text(body["qrCode"]),
        )

    async def verify_proof(self, proof: str, public_inputs: str) -> bool:
        try:
            body = await self._post_json(
                "verify", "/verify", {"proof": proof, "publicInputs": public_inputs}
            )
        except WorkerError as exc:
            logger.warning("Verification treated as invalid: %s", exc)
            return False

        is_valid = body.get("isValid")
        if not isinstance(is_valid, bool):
            PROOF_WORKER_FAILURES.labels(operation="verify", reason="malformed").inc()
            logger.warning(
                "Verification treated as invalid: non-boolean isValid=%r", is_valid
            )
            return False
        return is_valid

    async def ping(self) -> bool:
        try:
            resp = await self._client.get("/health")
        except httpx.HTTPError:
            return False
        return resp.is_success

    async def _post_json(
        self, operation: str, path: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """POST to the worker and return its JSON object, or raise WorkerError."""
        start = time.monotonic()
        try:
            resp = await self._client.post(path, json=payload)
        except httpx.HTTPError as exc:
            PROOF_WORKER_FAILURES.labels(operation=operation, reason="transport").inc()
            raise WorkerError(
                f"proof worker unreachable at {self._base_url}{path}: {exc!r}"
            ) from exc
        finally:
            PROOF_WORKER_DURATION.labels(operation=operation).observe(
                time.monotonic() - start
            )

        if not resp.is_success:
            PROOF_WORKER_FAILURES.labels(operation=operation, reason="status").inc()
            raise WorkerError(f"proof worker returned HTTP {resp.status_code} on {path}")

        try:
            body = resp.json()
        except ValueError as exc:
            PROOF_WORKER_FAILURES.labels(operation=operation, reason="malformed").inc()
            raise WorkerError(f"proof worker returned non-JSON body on {path}") from exc

        if not isinstance(body, dict):
            PROOF_WORKER_FAILURES.labels(operation=operation, reason="malformed").inc()
            raise WorkerError(f"proof worker returned non-object JSON on {path}")
        return body


# ---------------------------------------------------------------------------
# Module-level singleton (closed by the app lifespan)
# ---------------------------------------------------------------------------

proof_worker = HttpProofWorkerGateway(
    SETTINGS.proof_worker_url,
    timeout=SETTINGS.proof_worker_timeout_seconds,
)
