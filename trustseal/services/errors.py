"""Domain errors raised by the credential services.

Each error carries a human-readable message and a stable machine code.
The API layer maps them to HTTP statuses in one place (see
trustseal.main), so services never import FastAPI.
"""

from __future__ import annotations


class CredentialServiceError(Exception):
    code = "ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(CredentialServiceError):
    """A referenced issuer, student or credential does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier


class ValidationError(CredentialServiceError):
    """A required request field is missing or blank."""

    code = "VALIDATION_ERROR"


class WorkerError(CredentialServiceError):
    """The proof worker is unreachable or gave an unusable issuance response."""

    code = "PROOF_WORKER_ERROR"


class ConflictError(CredentialServiceError):
    """A uniqueness constraint rejected the write."""

    code = "CONFLICT"
