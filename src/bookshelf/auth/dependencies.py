"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current user identity from the request.

The guard walks a tiny state machine per request:

    no header ──────────────┐
    no "Bearer " prefix ────┼──▶ 401 "Authorization token missing or malformed"
    empty token ────────────┘
    token fails verify ─────────▶ 401 "Invalid or expired token"
    token verifies ─────────────▶ CurrentIdentity(user_id) → handler runs

Nothing is cached between requests; the identity is a plain value handed
to the handler as a parameter.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from bookshelf.auth.jwt import InvalidTokenError, TokenCodec
from bookshelf.errors import AuthenticationError

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "
MISSING_OR_MALFORMED = "Authorization token missing or malformed"


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller. All record queries are scoped by user_id."""

    user_id: int


def resolve_identity(
    authorization: Optional[str], codec: TokenCodec
) -> CurrentIdentity:
    """Turn a raw Authorization header into an identity, or raise.

    Raises AuthenticationError for every rejection.
    """
    # Prefix is case-sensitive with exactly one space: "bearer x" is rejected
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError(MISSING_OR_MALFORMED)

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError(MISSING_OR_MALFORMED)

    try:
        user_id = codec.verify(token)
    except InvalidTokenError as e:
        raise AuthenticationError(str(e)) from None

    structlog.contextvars.bind_contextvars(user_id=user_id)
    return CurrentIdentity(user_id=user_id)


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


async def get_current_user(
    authorization: Optional[str] = Header(None),
    codec: TokenCodec = Depends(get_token_codec),
) -> CurrentIdentity:
    """Extract current identity (required — 401 if no valid Bearer token)."""
    return resolve_identity(authorization, codec)
