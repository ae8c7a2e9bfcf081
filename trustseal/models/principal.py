from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller extracted from a validated JWT.

    Carried through the request via FastAPI's dependency system and
    handed to the services explicitly; the issuance path resolves the
    issuer from user_id and never from a request header or body.

        user_id: JWT subject, the caller's users.id
        roles:   roles claimed by the token (informational here)
    """

    user_id: str
    roles: frozenset[str] = frozenset()
