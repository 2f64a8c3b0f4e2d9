"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request. A handler that
declares `identity: CurrentIdentity = Depends(get_current_identity)`
never runs unless the bearer token checks out; any failure raises an
Unauthorized subclass, which the app renders as a 401 with
WWW-Authenticate: Bearer.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from inkwell.auth.jwt import SessionTokenService
from inkwell.errors import MissingToken

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated user making the request.

    Learn: Built only from verified token claims. Ownership checks
    compare user_id against a resource's user_id.
    """

    user_id: int
    username: str


def get_token_service(request: Request) -> SessionTokenService:
    """The app-wide token service built by create_app()."""
    return request.app.state.tokens


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an `Authorization: Bearer <token>` header.

    The scheme is case-sensitive and must be followed by exactly one space.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingToken()
    token = authorization[len(BEARER_PREFIX):]
    if not token:
        raise MissingToken()
    return token


async def get_current_identity(
    authorization: Optional[str] = Header(None),
    tokens: SessionTokenService = Depends(get_token_service),
) -> CurrentIdentity:
    """Validate the bearer token (required, 401 if absent or bad)."""
    token = extract_bearer_token(authorization)
    claims = tokens.decode(token)

    structlog.contextvars.bind_contextvars(user_id=claims.user_id)
    return CurrentIdentity(user_id=claims.user_id, username=claims.username)
