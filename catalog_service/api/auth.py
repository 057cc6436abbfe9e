"""Access token authentication.

Access tokens are RS256 JWTs issued by the identity provider. They are
read from the ``Authorization: Bearer`` header, falling back to the
``accessToken`` cookie, and verified against the provider's JWKS.
"""

from functools import lru_cache
from typing import Annotated, Any, Callable

import jwt
import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog_service.domain.access import AuthenticatedUser, Role, ensure_role
from catalog_service.domain.exceptions import Unauthorized
from catalog_service.infrastructure.config import settings

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


class TokenVerifier:
    """Verifies access tokens and extracts the caller's claims.

    Example usage:
        verifier = TokenVerifier(jwks_uri="https://auth.example.com/.well-known/jwks.json")
        user = verifier.verify(token)
    """

    def __init__(
        self,
        jwks_uri: str | None = None,
        key: Any | None = None,
        algorithms: list[str] | None = None,
    ) -> None:
        """Initialize verifier.

        Args:
            jwks_uri: JWKS endpoint of the identity provider (defaults to settings).
            key: Static verification key; bypasses the JWKS lookup.
            algorithms: Accepted signing algorithms (defaults to settings).
        """
        self.algorithms = algorithms or settings.jwt_algorithms
        self._key = key
        self._jwks_client = (
            None if key is not None else jwt.PyJWKClient(jwks_uri or settings.jwks_uri)
        )

    def _signing_key(self, token: str) -> Any:
        if self._key is not None:
            return self._key
        return self._jwks_client.get_signing_key_from_jwt(token).key

    def verify(self, token: str) -> AuthenticatedUser:
        """Verify a token.

        Args:
            token: Encoded JWT.

        Returns:
            The authenticated caller.

        Raises:
            Unauthorized: If the token is invalid, expired or lacks claims.
        """
        try:
            claims = jwt.decode(
                token,
                self._signing_key(token),
                algorithms=self.algorithms,
                options={"require": ["sub", "role"]},
            )
        except jwt.PyJWTError as e:
            logger.warning("Access token rejected", error=str(e))
            raise Unauthorized("Invalid access token") from e

        tenant = claims.get("tenant")
        return AuthenticatedUser(
            id=str(claims["sub"]),
            role=str(claims["role"]),
            tenant=str(tenant) if tenant not in (None, "") else None,
        )


@lru_cache
def get_token_verifier() -> TokenVerifier:
    """Get the process-wide token verifier."""
    return TokenVerifier()


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthenticatedUser:
    """Authenticate the caller of a request.

    Raises:
        Unauthorized: If no token is supplied or it fails verification.
    """
    token = credentials.credentials if credentials else None
    if not token:
        token = request.cookies.get(settings.access_token_cookie)
    if not token:
        raise Unauthorized("Missing access token")

    user = verifier.verify(token)
    request.state.user_id = user.id
    return user


def require_roles(*roles: Role) -> Callable[..., AuthenticatedUser]:
    """Build a dependency admitting only the given roles.

    Args:
        roles: Roles allowed to call the endpoint.

    Returns:
        FastAPI dependency returning the authenticated caller.
    """

    def dependency(
        user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        ensure_role(user, roles)
        return user

    return dependency
