"""
FastAPI dependencies - injection for the identity verifier and the principal
(SOLID: Dependency Inversion).
Challenge: Reusable auth gate, consistent 401s, swappable verifier in tests.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from krishisetu.config import get_settings
from krishisetu.core.exceptions import Unauthenticated
from krishisetu.core.security import FirebaseTokenVerifier
from krishisetu.schemas.auth import Principal

security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_verifier() -> FirebaseTokenVerifier:
    """Single verifier per process so the signing-key cache is shared."""
    return FirebaseTokenVerifier.from_settings(get_settings())


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    verifier: Annotated[FirebaseTokenVerifier, Depends(get_token_verifier)],
) -> Principal:
    """Resolve the bearer token to a principal. Raises 401 if missing or invalid."""
    if not credentials or not credentials.credentials:
        raise Unauthenticated("No token provided")
    return await verifier.verify(credentials.credentials)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
