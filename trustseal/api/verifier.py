"""Verifier endpoint.

POST /api/verifier/proofs/verify

A failed verification is a 200 with isValid=false.  Only a missing
proof or publicInputs is an error (422, worker not contacted).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from trustseal.api.credentials import CamelModel
from trustseal.api.dependencies import get_verification_forwarder
from trustseal.services.verification import VerificationForwarder

router = APIRouter(prefix="/api/verifier", tags=["verifier"])


class VerifyProofIn(CamelModel):
    # Optional at the schema level so a missing field gets the domain
    # error envelope rather than a generic validation error.
    proof: str | None = None
    public_inputs: str | None = None


class VerifyProofOut(CamelModel):
    success: bool = True
    is_valid: bool
    message: str
    timestamp: int


@router.post("/proofs/verify", response_model=VerifyProofOut)
async def verify_proof(
    body: VerifyProofIn,
    forwarder: Annotated[VerificationForwarder, Depends(get_verification_forwarder)],
) -> VerifyProofOut:
    result = await forwarder.verify(body.proof, body.public_inputs)
    return VerifyProofOut(
        is_valid=result.is_valid,
        message=(
            "Proof verified successfully"
            if result.is_valid
            else "Proof verification failed"
        ),
        timestamp=result.timestamp,
    )
