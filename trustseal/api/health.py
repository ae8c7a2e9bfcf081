"""Liveness and readiness probes.

/health answers "is the process up" and reports each dependency:

  database:      ok | degraded | not_configured
  proof_worker:  ok | unreachable

It always returns 200; the "status" field carries the verdict, so an
orchestrator does not restart the service over a slow proof worker.

/ready returns 503 only when a configured database cannot be reached.
Without the database no request can be served.  Without the proof
worker reads still work, and issuance reports its own error.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from trustseal.api.dependencies import get_proof_worker
from trustseal.db.engine import engine, ping_database
from trustseal.services.proof_worker import ProofWorkerGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _database_check() -> str:
    if engine is None:
        return "not_configured"
    return "ok" if await ping_database() else "degraded"


@router.get("/health")
async def health(
    worker: Annotated[ProofWorkerGateway, Depends(get_proof_worker)],
) -> dict:
    checks = {"database": await _database_check()}

    try:
        reachable = await worker.ping()
    except Exception:
        logger.warning("Proof worker health check raised", exc_info=True)
        reachable = False
    checks["proof_worker"] = "ok" if reachable else "unreachable"

    overall = (
        "ok"
        if checks["database"] in ("ok", "not_configured") and reachable
        else "degraded"
    )
    return {"status": overall, "checks": checks}


@router.get("/ready")
async def ready() -> Response:
    if await _database_check() == "degraded":
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(status_code=status.HTTP_200_OK)
