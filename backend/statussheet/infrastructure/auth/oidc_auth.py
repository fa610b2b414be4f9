"""
OIDC/JWT authentication provider.

Bearer tokens are verified against the issuer's JWKS. Users are identified
by the token subject; no local user table is kept.
"""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx
from jose import JWTError, jwt

from statussheet.core.config import Settings
from statussheet.core.exceptions import AuthenticationError
from statussheet.core.logger import setup_logger
from statussheet.interfaces.auth_provider import IAuthProvider, User

logger = setup_logger(__name__)

JWKS_FETCH_TIMEOUT_SECONDS = 10.0


class OidcAuthProvider(IAuthProvider):
    """Verifies OIDC ID/access tokens signed with keys from the issuer's JWKS."""

    def __init__(self, settings: Settings, jwks_ttl_seconds: int = 3600):
        if not settings.OIDC_ISSUER and not settings.OIDC_JWKS_URL:
            raise ValueError("OIDC_ISSUER or OIDC_JWKS_URL must be set for OIDC auth")
        self._settings = settings
        self._jwks_ttl_seconds = jwks_ttl_seconds
        self._jwks: Optional[dict[str, Any]] = None
        self._jwks_fetched_at = 0.0

    def _resolve_jwks_url(self) -> str:
        if self._settings.OIDC_JWKS_URL:
            return self._settings.OIDC_JWKS_URL
        return f"{self._settings.OIDC_ISSUER.rstrip('/')}/.well-known/jwks.json"

    async def _get_jwks(self) -> dict[str, Any]:
        if self._jwks and time.time() - self._jwks_fetched_at < self._jwks_ttl_seconds:
            return self._jwks

        url = self._resolve_jwks_url()
        logger.debug(f"Fetching JWKS from {url}")
        async with httpx.AsyncClient(timeout=JWKS_FETCH_TIMEOUT_SECONDS) as client:
            response = await client.get(url)
            response.raise_for_status()
        self._jwks = response.json()
        self._jwks_fetched_at = time.time()
        return self._jwks

    @staticmethod
    def _signing_key(jwks: dict[str, Any], kid: Optional[str]) -> dict[str, Any]:
        for key in jwks.get("keys", []):
            if key.get("kid") == kid:
                return key
        raise JWTError(f"No signing key with kid {kid!r}")

    async def _claims(self, token: str) -> dict[str, Any]:
        header = jwt.get_unverified_header(token)
        key = self._signing_key(await self._get_jwks(), header.get("kid"))
        audience = self._settings.OIDC_AUDIENCE or None
        issuer = self._settings.OIDC_ISSUER or None
        return jwt.decode(
            token,
            key,
            algorithms=[header.get("alg", "RS256")],
            audience=audience,
            issuer=issuer,
            options={"verify_aud": audience is not None, "verify_iss": issuer is not None},
        )

    async def verify_token(self, token: str) -> User:
        """
        Verify signature and standard claims, then map claims to a User.

        Raises:
            AuthenticationError: Invalid token or unreachable JWKS endpoint
        """
        try:
            claims = await self._claims(token)
        except JWTError as e:
            raise AuthenticationError("Invalid token", details=str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch JWKS: {e}")
            raise AuthenticationError("Unable to verify token") from e

        subject = claims.get("sub")
        if not subject:
            raise AuthenticationError("Token has no subject")

        return User(
            id=str(subject),
            email=claims.get(self._settings.OIDC_EMAIL_CLAIM or "email"),
            display_name=(
                claims.get(self._settings.OIDC_NAME_CLAIM or "name")
                or claims.get("preferred_username")
            ),
        )

    def is_enabled(self) -> bool:
        return True
