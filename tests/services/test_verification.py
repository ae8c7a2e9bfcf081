from __future__ import annotations

import asyncio
import time

import pytest

from tests.conftest import FakeProofWorker
from trustseal.services.errors import ValidationError
from trustseal.services.verification import VerificationForwarder


class _ExplodingWorker(FakeProofWorker):
    async def verify_proof(self, proof: str, public_inputs: str) -> bool:
        raise RuntimeError("connection reset")


def test_valid_proof_is_reported_valid() -> None:
    worker = FakeProofWorker()
    before = int(time.time() * 1000)

    result = asyncio.run(VerificationForwarder(worker).verify("proof", "inputs"))

    assert result.is_valid is True
    assert result.timestamp >= before
    assert worker.verified == [("proof", "inputs")]


def test_invalid_proof_is_a_normal_result() -> None:
    worker = FakeProofWorker()
    worker.valid = False

    result = asyncio.run(VerificationForwarder(worker).verify("proof", "inputs"))

    assert result.is_valid is False


def test_worker_exception_fails_closed() -> None:
    result = asyncio.run(
        VerificationForwarder(_ExplodingWorker()).verify("proof", "inputs")
    )
    assert result.is_valid is False


@pytest.mark.parametrize(
    ("proof", "public_inputs", "missing"),
    [
        (None, "inputs", "proof"),
        ("proof", None, "publicInputs"),
        ("  ", "", "proof, publicInputs"),
    ],
)
def test_missing_input_is_rejected_without_calling_worker(
    proof: str | None, public_inputs: str | None, missing: str
) -> None:
    worker = FakeProofWorker()

    with pytest.raises(ValidationError, match=f"Missing required fields: {missing}"):
        asyncio.run(VerificationForwarder(worker).verify(proof, public_inputs))

    assert worker.verified == []
