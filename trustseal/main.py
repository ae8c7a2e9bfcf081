from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trustseal.api.credentials import router as credentials_router
from trustseal.api.dependencies import seed_dev_issuer
from trustseal.api.health import router as health_router
from trustseal.api.issuer import router as issuer_router
from trustseal.api.metrics_endpoint import router as metrics_router
from trustseal.api.student import router as student_router
from trustseal.api.verifier import router as verifier_router
from trustseal.core.config import SETTINGS
from trustseal.core.logging import setup_logging
from trustseal.db.engine import engine, lifespan_db
from trustseal.middleware.metrics import MetricsMiddleware
from trustseal.middleware.request_context import RequestContextMiddleware
from trustseal.services.errors import (
    ConflictError,
    CredentialServiceError,
    NotFoundError,
    ValidationError,
    WorkerError,
)
from trustseal.services.proof_worker import proof_worker

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[CredentialServiceError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    WorkerError: status.HTTP_502_BAD_GATEWAY,
    ConflictError: status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    async with lifespan_db():
        if SETTINGS.is_dev and engine is None:
            await seed_dev_issuer()
        try:
            yield
        finally:
            await proof_worker.aclose()


app = FastAPI(
    title="trustseal",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)


@app.exception_handler(CredentialServiceError)
async def credential_error_handler(
    request: Request, exc: CredentialServiceError
) -> JSONResponse:
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = sorted(
        {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "error": f"Invalid request fields: {', '.join(fields)}"
            if fields
            else "Invalid request",
            "code": ValidationError.code,
            "details": jsonable_encoder(exc.errors()),
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last added runs first: RequestContext -> Metrics -> CORS -> route.
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(credentials_router)
app.include_router(issuer_router)
app.include_router(student_router)
app.include_router(verifier_router)

logger.info(
    "trustseal started  env=%s log_level=%s port=%d proof_worker=%s docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    SETTINGS.proof_worker_url,
    "on" if SETTINGS.is_dev else "off",
)
