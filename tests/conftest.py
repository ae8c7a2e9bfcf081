from __future__ import annotations

import asyncio
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so `import trustseal` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from trustseal.api import dependencies  # noqa: E402
from trustseal.api.dependencies import DEV_ISSUER, get_proof_worker  # noqa: E402
from trustseal.main import app  # noqa: E402
from trustseal.models.user import User  # noqa: E402
from trustseal.services import token_service  # noqa: E402
from trustseal.services.proof_worker import IssuanceClaim, IssuanceReceipt  # noqa: E402


class FakeProofWorker:
    """In-process stand-in for the proof worker.

    Mints credential ids CRED-0001, CRED-0002, ... unless fixed_credential_id
    is set.  Set fail_issuance / valid / reachable to drive error paths.
    """

    def __init__(self) -> None:
        self.issued: list[IssuanceClaim] = []
        self.verified: list[tuple[str, str]] = []
        self.fail_issuance: Exception | None = None
        self.fixed_credential_id: str | None = None
        self.valid = True
        self.reachable = True

    async def request_issuance(self, claim: IssuanceClaim) -> IssuanceReceipt:
        self.issued.append(claim)
        if self.fail_issuance is not None:
            raise self.fail_issuance
        credential_id = self.fixed_credential_id or f"CRED-{len(self.issued):04d}"
        return IssuanceReceipt(
            credential_id=credential_id,
            proof=f'{{"pi_a":"{credential_id}"}}',
            qr_code=f"data:image/png;base64,{credential_id}",
        )

    async def verify_proof(self, proof: str, public_inputs: str) -> bool:
        self.verified.append((proof, public_inputs))
        return self.valid

    async def ping(self) -> bool:
        return self.reachable


@pytest.fixture(autouse=True)
def reset_repos() -> None:
    dependencies.user_repo._by_id.clear()
    dependencies.user_repo._by_username.clear()
    dependencies.user_repo._by_student_id.clear()
    dependencies.credential_repo._by_id.clear()
    dependencies.credential_repo._by_credential_id.clear()


@pytest.fixture
def fake_worker() -> Iterator[FakeProofWorker]:
    worker = FakeProofWorker()
    app.dependency_overrides[get_proof_worker] = lambda: worker
    yield worker
    app.dependency_overrides.pop(get_proof_worker, None)


@pytest.fixture
def client(fake_worker: FakeProofWorker) -> TestClient:
    # No `with`: the lifespan would close the shared proof worker client.
    return TestClient(app)


def mint_token(sub: str, roles: list[str] | None = None) -> str:
    """Create a valid ES256 JWT for testing."""
    return token_service.create_access_token(sub=sub, roles=roles)


def auth(sub: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {mint_token(sub)}"}


@pytest.fixture
def issuer() -> User:
    """The demo registrar, stored in the in-memory user repo."""
    return asyncio.run(dependencies.user_repo.add(DEV_ISSUER))


@pytest.fixture
def issuer_headers(issuer: User) -> dict[str, str]:
    return auth(str(issuer.id))


def issue_payload(**overrides: str) -> dict[str, str]:
    payload = {
        "studentName": "Ada Lovelace",
        "degree": "BSc Mathematics",
        "institution": "Demo University",
        "issueDate": "2024-06-15",
        "studentId": "S-1001",
        "studentEmail": "ada@demo.edu",
    }
    payload.update(overrides)
    return payload
