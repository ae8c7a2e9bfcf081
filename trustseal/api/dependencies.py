"""FastAPI dependency providers.

Routers never construct services themselves; they declare what they need
here and FastAPI builds it per request.  Tests swap any provider through
app.dependency_overrides.

Repository wiring follows the database config at import time: with
DATABASE_URL, request-scoped Pg repos sharing one session; without it,
module-level in-memory repos.
"""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from trustseal.db.engine import async_session_factory, get_async_session
from trustseal.models.principal import Principal
from trustseal.models.user import ROLE_ISSUER_ADMIN, User
from trustseal.repos.credential_repo import CredentialRepo, InMemoryCredentialRepo
from trustseal.repos.pg_credential_repo import PgCredentialRepo
from trustseal.repos.pg_user_repo import PgUserRepo
from trustseal.repos.user_repo import InMemoryUserRepo, UserRepo
from trustseal.services import token_service
from trustseal.services.credential_lookup import CredentialLookup
from trustseal.services.identity_registry import IdentityRegistry
from trustseal.services.issuance import IssuanceOrchestrator
from trustseal.services.proof_worker import ProofWorkerGateway, proof_worker
from trustseal.services.verification import VerificationForwarder

logger = logging.getLogger(__name__)

# Tokens are minted by the platform auth server, not here.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/oauth/token")


def require_user(
    raw_token: Annotated[str, Depends(oauth2_scheme)],
) -> Principal:
    """Validate the bearer token and return the calling Principal."""
    try:
        claims = token_service.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    principal = Principal(
        user_id=claims["sub"],
        roles=frozenset(claims.get("roles", [])),
    )
    logger.debug("Token validated for user=%s", principal.user_id)
    return principal


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------

user_repo = InMemoryUserRepo()
credential_repo = InMemoryCredentialRepo()

DEV_ISSUER = User(
    id=UUID("00000000-0000-0000-0000-000000000001"),
    username="registrar@demo.edu",
    email="registrar@demo.edu",
    full_name="Demo Registrar",
    role=ROLE_ISSUER_ADMIN,
    institution="Demo University",
)


async def seed_dev_issuer() -> None:
    """Give local dev one issuer to mint tokens for (sub=DEV_ISSUER.id)."""
    if await user_repo.get_by_id(DEV_ISSUER.id) is None:
        await user_repo.add(DEV_ISSUER)


if async_session_factory is not None:

    def get_user_repo(
        session: Annotated[AsyncSession, Depends(get_async_session)],
    ) -> UserRepo:
        return PgUserRepo(session)

    def get_credential_repo(
        session: Annotated[AsyncSession, Depends(get_async_session)],
    ) -> CredentialRepo:
        return PgCredentialRepo(session)

else:

    def get_user_repo() -> UserRepo:
        return user_repo

    def get_credential_repo() -> CredentialRepo:
        return credential_repo


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


def get_proof_worker() -> ProofWorkerGateway:
    return proof_worker


def get_identity_registry(
    users: Annotated[UserRepo, Depends(get_user_repo)],
) -> IdentityRegistry:
    return IdentityRegistry(users)


def get_issuance_orchestrator(
    registry: Annotated[IdentityRegistry, Depends(get_identity_registry)],
    worker: Annotated[ProofWorkerGateway, Depends(get_proof_worker)],
    credentials: Annotated[CredentialRepo, Depends(get_credential_repo)],
) -> IssuanceOrchestrator:
    return IssuanceOrchestrator(registry, worker, credentials)


def get_verification_forwarder(
    worker: Annotated[ProofWorkerGateway, Depends(get_proof_worker)],
) -> VerificationForwarder:
    return VerificationForwarder(worker)


def get_credential_lookup(
    credentials: Annotated[CredentialRepo, Depends(get_credential_repo)],
    registry: Annotated[IdentityRegistry, Depends(get_identity_registry)],
) -> CredentialLookup:
    return CredentialLookup(credentials, registry)
