from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from trustseal.core.metrics import VERIFICATIONS
from trustseal.services.errors import ValidationError
from trustseal.services.proof_worker import ProofWorkerGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VerificationResult:
    is_valid: bool
    timestamp: int  # epoch milliseconds, UTC


class VerificationForwarder:
    """Forwards proof checks to the proof worker.

    An invalid proof is a normal result, not an error.  The only error
    this raises is ValidationError for a missing input, and in that case
    the worker is never called.
    """

    def __init__(self, proof_worker: ProofWorkerGateway) -> None:
        self._worker = proof_worker

    async def verify(
        self, proof: str | None, public_inputs: str | None
    ) -> VerificationResult:
        missing = [
            name
            for name, value in (("proof", proof), ("publicInputs", public_inputs))
            if value is None or not value.strip()
        ]
        if missing:
            VERIFICATIONS.labels(result="rejected").inc()
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        try:
            is_valid = await self._worker.verify_proof(proof, public_inputs)  # type: ignore[arg-type]
        except Exception:
            # Fail closed: whatever went wrong, the proof is not vouched for.
            logger.exception("Proof worker verification raised; reporting invalid")
            is_valid = False

        VERIFICATIONS.labels(result="valid" if is_valid else "invalid").inc()
        logger.info("Proof verification completed valid=%s", is_valid)
        return VerificationResult(
            is_valid=is_valid,
            timestamp=int(datetime.now(UTC).timestamp() * 1000),
        )
