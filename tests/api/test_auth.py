"""Bearer token handling on the issuer routes."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
from fastapi.testclient import TestClient

from trustseal.services import token_service


def test_missing_token_is_401(client: TestClient) -> None:
    resp = client.get("/api/issuer/credentials")
    assert resp.status_code == 401


def test_garbage_token_is_401(client: TestClient) -> None:
    resp = client.get(
        "/api/issuer/credentials", headers={"Authorization": "Bearer not.a.jwt"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


def test_expired_token_is_401(client: TestClient) -> None:
    now = datetime.now(UTC)
    token = jwt.encode(
        {
            "sub": "someone",
            "iss": token_service.ISSUER,
            "aud": token_service.AUDIENCE,
            "iat": now - timedelta(hours=1),
            "exp": now - timedelta(minutes=1),
            "jti": "x",
        },
        token_service._private_key,
        algorithm=token_service.ALGORITHM,
    )

    resp = client.get(
        "/api/issuer/credentials", headers={"Authorization": f"Bearer {token}"}
    )

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token expired"


def test_hs256_token_is_rejected(client: TestClient) -> None:
    token = jwt.encode(
        {"sub": "someone", "iss": token_service.ISSUER, "aud": token_service.AUDIENCE},
        "shared-secret",
        algorithm="HS256",
    )
    resp = client.get(
        "/api/issuer/credentials", headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 401


def test_valid_token_for_unknown_issuer_is_404(client: TestClient) -> None:
    token = token_service.create_access_token(sub="not-a-registered-user")
    resp = client.get(
        "/api/issuer/credentials", headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"
