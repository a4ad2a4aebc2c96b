"""
Security: bearer-token verification against the external identity service.
Challenge: Firebase ID tokens are RS256 JWTs signed by rotating Google keys;
fetch the public certificates with a bounded timeout and cache them for as
long as Google says they are valid.
"""

import logging
import re
import time

import httpx
from jose import JWTError, jwt

from krishisetu.config import Settings
from krishisetu.core.exceptions import ServiceUnavailable, Unauthenticated
from krishisetu.schemas.auth import Principal

logger = logging.getLogger(__name__)

ISSUER_PREFIX = "https://securetoken.google.com/"
_MAX_AGE = re.compile(r"max-age=(\d+)")
# Unknown key ids trigger at most one refetch per interval
MIN_REFETCH_SECONDS = 60.0


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens and turns their claims into a Principal."""

    def __init__(
        self,
        project_id: str | None,
        certs_url: str,
        timeout: float = 5.0,
        algorithms: tuple[str, ...] = ("RS256",),
        transport: httpx.AsyncBaseTransport | None = None,
        min_refetch_seconds: float = MIN_REFETCH_SECONDS,
    ):
        self.project_id = project_id
        self.certs_url = certs_url
        self.timeout = timeout
        self.algorithms = algorithms
        self.transport = transport
        self.min_refetch_seconds = min_refetch_seconds
        self._keys: dict[str, str] = {}
        self._keys_expire_at = 0.0
        self._fetched_at = float("-inf")

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirebaseTokenVerifier":
        return cls(
            project_id=settings.resolved_project_id,
            certs_url=settings.google_certs_url,
            timeout=settings.identity_timeout_seconds,
        )

    async def _fetch_keys(self) -> None:
        self._fetched_at = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.certs_url)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ServiceUnavailable("Identity service timed out") from exc
        except httpx.HTTPError as exc:
            raise ServiceUnavailable(f"Identity service unreachable: {exc}") from exc

        try:
            keys = response.json()
        except ValueError as exc:
            raise ServiceUnavailable("Identity service returned malformed certificates") from exc
        match = _MAX_AGE.search(response.headers.get("cache-control", ""))
        max_age = int(match.group(1)) if match else 0
        self._keys = keys
        self._keys_expire_at = time.monotonic() + max_age

    async def _signing_key(self, kid: str) -> str | None:
        now = time.monotonic()
        expired = now >= self._keys_expire_at
        may_refetch = now - self._fetched_at >= self.min_refetch_seconds
        if expired or (kid not in self._keys and may_refetch):
            await self._fetch_keys()
        return self._keys.get(kid)

    async def verify(self, token: str) -> Principal:
        """Return the principal for a valid token, raise Unauthenticated otherwise."""
        if not self.project_id:
            raise ServiceUnavailable("Identity service is not configured")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            logger.warning("Token verification failed: %s", exc)
            raise Unauthenticated("Invalid token") from exc

        kid = header.get("kid")
        key = await self._signing_key(kid) if kid else None
        if key is None:
            logger.warning("Token verification failed: unknown key id %r", kid)
            raise Unauthenticated("Invalid token")

        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=list(self.algorithms),
                audience=self.project_id,
                issuer=ISSUER_PREFIX + self.project_id,
            )
        except JWTError as exc:
            logger.warning("Token verification failed: %s", exc)
            raise Unauthenticated("Invalid token") from exc

        uid = claims.get("sub")
        email = claims.get("email")
        if not uid or not email:
            raise Unauthenticated("Invalid token")
        name = claims.get("name") or (claims.get("firebase") or {}).get("sign_in_provider") or ""
        return Principal(uid=uid, email=email, name=name)
