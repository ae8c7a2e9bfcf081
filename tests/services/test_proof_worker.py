"""HTTP proof worker client, with the worker stubbed by respx."""

from __future__ import annotations

import asyncio
import datetime
import json

import httpx
import pytest
import respx
from httpx import Response

from trustseal.services.errors import WorkerError
from trustseal.services.proof_worker import HttpProofWorkerGateway, IssuanceClaim

BASE = "http://proof-worker.test"

CLAIM = IssuanceClaim(
    student_name="Ada Lovelace",
    degree="BSc Mathematics",
    institution="Demo University",
    issue_date=datetime.date(2024, 6, 15),
    student_id="S-1001",
)


def _issue(gateway_kwargs: dict | None = None):
    async def go():
        gateway = HttpProofWorkerGateway(BASE, **(gateway_kwargs or {}))
        try:
            return await gateway.request_issuance(CLAIM)
        finally:
            await gateway.aclose()

    return asyncio.run(go())


def _verify(proof: str = "p", public_inputs: str = "i") -> bool:
    async def go():
        gateway = HttpProofWorkerGateway(BASE)
        try:
            return await gateway.verify_proof(proof, public_inputs)
        finally:
            await gateway.aclose()

    return asyncio.run(go())


@respx.mock
def test_issue_sends_claim_and_parses_receipt() -> None:
    route = respx.post(f"{BASE}/issue").mock(
        return_value=Response(
            200,
            json={
                "success": True,
                "credentialId": "CRED-42",
                "proof": {"pi_a": ["1", "2"], "protocol": "groth16"},
                "qrCode": "data:image/png;base64,AAAA",
            },
        )
    )

    receipt = _issue()

    assert json.loads(route.calls.last.request.content) == {
        "studentName": "Ada Lovelace",
        "degree": "BSc Mathematics",
        "institution": "Demo University",
        "issueDate": "2024-06-15",
        "studentId": "S-1001",
    }
    assert receipt.credential_id == "CRED-42"
    assert json.loads(receipt.proof) == {"pi_a": ["1", "2"], "protocol": "groth16"}
    assert receipt.qr_code == "data:image/png;base64,AAAA"


@respx.mock
def test_issue_rejected_by_worker_raises() -> None:
    respx.post(f"{BASE}/issue").mock(
        return_value=Response(200, json={"success": False, "error": "circuit failed"})
    )
    with pytest.raises(WorkerError, match="circuit failed"):
        _issue()


@respx.mock
def test_issue_missing_fields_raises() -> None:
    respx.post(f"{BASE}/issue").mock(
        return_value=Response(200, json={"success": True, "credentialId": "CRED-1"})
    )
    with pytest.raises(WorkerError, match="missing fields: proof, qrCode"):
        _issue()


@respx.mock
def test_issue_http_error_status_raises() -> None:
    respx.post(f"{BASE}/issue").mock(return_value=Response(500, text="oops"))
    with pytest.raises(WorkerError, match="HTTP 500"):
        _issue()


@respx.mock
def test_issue_non_json_body_raises() -> None:
    respx.post(f"{BASE}/issue").mock(return_value=Response(200, text="<html>"))
    with pytest.raises(WorkerError, match="non-JSON"):
        _issue()


@respx.mock
def test_issue_transport_failure_raises() -> None:
    respx.post(f"{BASE}/issue").mock(side_effect=httpx.ConnectError("refused"))
    with pytest.raises(WorkerError, match="unreachable"):
        _issue()


@respx.mock
def test_issue_timeout_raises() -> None:
    respx.post(f"{BASE}/issue").mock(side_effect=httpx.ReadTimeout("slow"))
    with pytest.raises(WorkerError):
        _issue({"timeout": 0.5})


@respx.mock
def test_verify_forwards_inputs_and_returns_verdict() -> None:
    route = respx.post(f"{BASE}/verify").mock(
        return_value=Response(200, json={"isValid": True})
    )

    assert _verify("proof-text", "inputs-text") is True
    assert json.loads(route.calls.last.request.content) == {
        "proof": "proof-text",
        "publicInputs": "inputs-text",
    }


@pytest.mark.parametrize(
    "response",
    [
        Response(200, json={"isValid": False}),
        Response(200, json={"isValid": "true"}),
        Response(200, json={}),
        Response(503),
        Response(200, text="not json"),
    ],
)
def test_verify_anything_but_true_is_invalid(response: Response) -> None:
    with respx.mock:
        respx.post(f"{BASE}/verify").mock(return_value=response)
        assert _verify() is False


@respx.mock
def test_verify_unreachable_worker_is_invalid() -> None:
    respx.post(f"{BASE}/verify").mock(side_effect=httpx.ConnectError("refused"))
    assert _verify() is False


@respx.mock
def test_ping_reports_worker_health() -> None:
    respx.get(f"{BASE}/health").mock(return_value=Response(200, json={"status": "ok"}))

    async def go() -> bool:
        gateway = HttpProofWorkerGateway(BASE + "/")
        try:
            return await gateway.ping()
        finally:
            await gateway.aclose()

    assert asyncio.run(go()) is True
