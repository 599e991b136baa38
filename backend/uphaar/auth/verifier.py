"""
Uphaar Backend: Token Verifier
==============================

What:  Turns a bearer token into an Identity, or raises TokenVerificationError.
How:   TokenVerifier is the collaborator interface the Authentication Hook
       depends on. FirebaseTokenVerifier checks Firebase ID tokens locally:
       RS256 signature against Google's published signing keys, audience,
       issuer, and expiry.
Who:   Built once at startup by build_context(); tests inject a fake.

Signing key cache:
    Keys are fetched with httpx from the JWKS url and cached by kid for
    jwks_cache_ttl seconds. A token whose kid is not in the cache forces one
    refetch (Google rotates keys), after which an unknown kid is rejected.
"""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import jwt
from jwt.algorithms import RSAAlgorithm

from uphaar.auth.identity import Identity
from uphaar.config import Settings
from uphaar.exceptions import TokenVerificationError

logger = logging.getLogger(__name__)

FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"


class TokenVerifier(ABC):
    """Identity-provider collaborator."""

    @abstractmethod
    async def verify(self, token: str) -> Identity:
        """Return the identity carried by token, or raise TokenVerificationError."""

    async def aclose(self) -> None:
        """Release network resources. No-op by default."""


class FirebaseTokenVerifier(TokenVerifier):
    """Verifies Firebase Authentication ID tokens."""

    def __init__(
        self,
        project_id: str,
        jwks_url: str,
        cache_ttl: int = 3600,
        leeway: int = 10,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
    ):
        self.project_id = project_id
        self.jwks_url = jwks_url
        self.cache_ttl = cache_ttl
        self.leeway = leeway
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._keys: Dict[str, Any] = {}
        self._fetched_at: float = 0.0
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: Optional[httpx.AsyncClient] = None
    ) -> "FirebaseTokenVerifier":
        return cls(
            project_id=settings.firebase_project_id,
            jwks_url=settings.firebase_jwks_url,
            cache_ttl=settings.jwks_cache_ttl,
            leeway=settings.token_leeway,
            http_client=http_client,
            timeout=settings.auth_http_timeout,
        )

    @property
    def issuer(self) -> str:
        return f"{FIREBASE_ISSUER_PREFIX}{self.project_id}"

    # ── Signing keys ──────────────────────────────────────────────────────

    def _cache_fresh(self) -> bool:
        return bool(self._keys) and (time.monotonic() - self._fetched_at) < self.cache_ttl

    async def _fetch_keys(self) -> None:
        try:
            response = await self._client.get(self.jwks_url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TokenVerificationError(
                context={"reason": "jwks_fetch_failed", "error": str(e)}
            ) from e
        if not isinstance(payload, dict):
            raise TokenVerificationError(context={"reason": "jwks_malformed"})

        keys: Dict[str, Any] = {}
        for key_data in payload.get("keys", []):
            kid = key_data.get("kid")
            if not kid:
                continue
            try:
                keys[kid] = RSAAlgorithm.from_jwk(json.dumps(key_data))
            except jwt.PyJWTError as e:
                logger.warning("Skipping unusable signing key %s: %s", kid, e)

        self._keys = keys
        self._fetched_at = time.monotonic()
        logger.debug("Fetched %d signing keys from %s", len(keys), self.jwks_url)

    async def _signing_key(self, kid: str) -> Any:
        async with self._lock:
            refreshed = False
            if not self._cache_fresh():
                await self._fetch_keys()
                refreshed = True
            key = self._keys.get(kid)
            if key is None and not refreshed:
                await self._fetch_keys()
                key = self._keys.get(kid)
        if key is None:
            raise TokenVerificationError(context={"reason": "unknown_kid", "kid": kid})
        return key

    # ── Verification ──────────────────────────────────────────────────────

    async def verify(self, token: str) -> Identity:
        if not self.project_id:
            raise TokenVerificationError(context={"reason": "project_id_not_configured"})

        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise TokenVerificationError(context={"reason": "malformed", "error": str(e)}) from e

        if header.get("alg") != "RS256":
            raise TokenVerificationError(context={"reason": "bad_alg", "alg": header.get("alg")})
        kid = header.get("kid")
        if not kid:
            raise TokenVerificationError(context={"reason": "missing_kid"})

        key = await self._signing_key(kid)

        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=self.issuer,
                leeway=self.leeway,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.PyJWTError as e:
            raise TokenVerificationError(
                context={"reason": type(e).__name__, "error": str(e)}
            ) from e

        if not claims.get("sub"):
            raise TokenVerificationError(context={"reason": "empty_sub"})

        return Identity.from_claims(claims)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
