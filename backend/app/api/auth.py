"""Identity resolution for API requests.

Bearer tokens are Auth0 access tokens verified against the tenant's JWKS.
Requests without an Authorization header run as a local guest user.
"""

import logging
from functools import lru_cache
from typing import Annotated, Any, Protocol

import httpx
from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import get_settings
from backend.app.db.context import RequestIdentity
from backend.app.db.engine import get_session
from backend.app.db.histories import find_or_create_user
from backend.app.db.models import User

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """Bearer token could not be verified."""


class TokenVerifier(Protocol):
    """Protocol for bearer token verification."""

    async def verify(self, token: str) -> dict[str, Any]:
        """Verify a token and return its claims.

        Raises:
            InvalidTokenError: If the token is not valid
        """
        ...


class Auth0TokenVerifier:
    """RS256 verification against an Auth0 tenant's JWKS."""

    def __init__(
        self,
        domain: str,
        audience: str,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize verifier.

        Args:
            domain: Auth0 tenant domain (e.g. "example.us.auth0.com")
            audience: Expected `aud` claim
            client: Optional httpx client (for testing with mocks)
        """
        self._domain = domain
        self._audience = audience
        self._client = client
        self._keys: dict[str, dict[str, Any]] = {}

    @property
    def issuer(self) -> str:
        return f"https://{self._domain}/"

    async def _fetch_keys(self) -> None:
        url = f"https://{self._domain}/.well-known/jwks.json"
        if self._client is not None:
            response = await self._client.get(url)
        else:
            async with httpx.AsyncClient(timeout=4.0) as client:
                response = await client.get(url)
        response.raise_for_status()
        self._keys = {key["kid"]: key for key in response.json().get("keys", []) if "kid" in key}

    async def _signing_key(self, kid: str) -> dict[str, Any]:
        if kid not in self._keys:
            try:
                await self._fetch_keys()
            except (httpx.HTTPError, ValueError) as e:
                raise InvalidTokenError(f"Unable to fetch JWKS: {e}") from e
        key = self._keys.get(kid)
        if key is None:
            raise InvalidTokenError("Unknown signing key")
        return key

    async def verify(self, token: str) -> dict[str, Any]:
        """Verify signature, audience and issuer; return the claims."""
        if not self._domain:
            raise InvalidTokenError("Auth0 domain is not configured")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise InvalidTokenError("Malformed token header") from e

        key = await self._signing_key(header.get("kid", ""))

        try:
            return jwt.decode(
                token,
                key,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self.issuer,
            )
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e


@lru_cache
def get_token_verifier() -> TokenVerifier:
    """Get cached verifier configured from settings."""
    settings = get_settings()
    return Auth0TokenVerifier(domain=settings.auth0_domain, audience=settings.auth0_audience)


async def get_current_identity(
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    authorization: Annotated[str | None, Header()] = None,
) -> RequestIdentity:
    """Extract request identity from the authorization header.

    Args:
        verifier: Token verifier
        authorization: Authorization header (e.g., "Bearer <token>")

    Returns:
        RequestIdentity for the token subject, or the local guest

    Raises:
        HTTPException: 401 if a bearer token is present but invalid
    """
    if not authorization or not authorization.startswith("Bearer "):
        return RequestIdentity.guest()

    token = authorization[7:]  # Strip "Bearer "

    try:
        claims = await verifier.verify(token)
    except InvalidTokenError as e:
        logger.warning(f"JWT verify error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    sub = claims.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return RequestIdentity(sub=sub, email=claims.get("email"), name=claims.get("name"))


async def get_current_user(
    identity: Annotated[RequestIdentity, Depends(get_current_identity)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> User:
    """Map the request identity to a stored user, creating it on first use."""
    return await find_or_create_user(
        session, identity.sub, email=identity.email, name=identity.name
    )
