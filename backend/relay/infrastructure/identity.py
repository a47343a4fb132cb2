"""Identity Resolution — maps an Authorization header to an authenticated user id.

Invariants:
    - No header, or not a Bearer header -> None (anonymous)
    - Invalid, expired or wrong-audience token -> None, logged at warning
    - A valid token yields its `sub` claim; tokens without `sub` are anonymous
    - Never raises: procedures that need an identity fail with UnauthenticatedError

Design Decisions:
    - Tokens are minted by the external identity provider with a shared HS256
      secret; this module only verifies them
"""

import logging

import jwt

from relay.config import Settings
from relay.core.domain_types import IdentityId

logger = logging.getLogger(__name__)


def bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None


def resolve_identity(
    authorization: str | None, settings: Settings,
) -> IdentityId | None:
    token = bearer_token(authorization)
    if token is None:
        return None
    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
        )
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        return None
    subject = claims.get("sub")
    return IdentityId(subject) if subject else None
