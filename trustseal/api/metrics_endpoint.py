"""GET /metrics in Prometheus text exposition format.

Carries the HTTP request series plus the credential counters declared
in trustseal.core.metrics (issuances, verifications, proof worker
latency and failures).  Keep it off the public ingress.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
