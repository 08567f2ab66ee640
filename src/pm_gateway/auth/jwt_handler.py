"""JWT access tokens: the authenticated caller identity.

Tokens are issued by an external identity provider that shares JWT_SECRET
(HS256). The `sub` claim is the opaque principal used as creator,
participant and account id throughout the service.

create_access_token exists for issuers, operators and tests.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.pm_account.domain.models import SYSTEM_ACCOUNT_IDS
from src.pm_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(principal: str, expires_in: timedelta | None = None) -> str:
    """Issue a short-lived access token (default: JWT_EXPIRE_MINUTES)."""
    now = datetime.now(UTC)
    payload = {
        "sub": principal,
        "type": "access",
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else _ACCESS_EXPIRE),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> str:
    """Validate an access token and return its principal.

    Raises:
        InvalidCredentialsError: bad signature, expired, wrong type, empty subject,
            or a subject naming a system account (escrow, platform fee).
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    principal = payload.get("sub")
    if not principal or principal in SYSTEM_ACCOUNT_IDS:
        raise InvalidCredentialsError()
    return str(principal)
