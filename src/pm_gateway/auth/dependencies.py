"""FastAPI dependency: get_current_principal.

Usage in any protected router:
    from src.pm_gateway.auth.dependencies import get_current_principal

    @router.post("/protected")
    async def protected(caller: str = Depends(get_current_principal)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from config.settings import settings
from src.pm_common.errors import InvalidCredentialsError, NotAuthorizedError
from src.pm_gateway.auth.jwt_handler import decode_access_token

# Tokens come from the external identity provider; tokenUrl is documentation only
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_principal(token: str = Depends(oauth2_scheme)) -> str:
    """Extract and validate the JWT Bearer token, return the caller principal.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    try:
        return decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None


async def require_contract_owner(
    caller: str = Depends(get_current_principal),
) -> str:
    """Verify the caller is the configured contract owner (admin endpoints)."""
    if caller != settings.CONTRACT_OWNER:
        raise NotAuthorizedError("contract owner required")
    return caller
