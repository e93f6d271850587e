"""JWT issuing and verification for staff sessions.

HS256 with the shared JWT_SECRET. Tokens carry the staff id in `sub` and a
`type` claim ("access" or "refresh") so one can never stand in for the other.

There is no revocation list: a deactivated or deleted member keeps a valid
token until expiry, but get_current_staff re-reads the staff row on every
request and rejects them there.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.bo_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


def _issue(staff_id: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    claims = {
        "sub": staff_id,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return str(jwt.encode(claims, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(staff_id: str) -> str:
    """Short-lived bearer token (JWT_EXPIRE_MINUTES)."""
    return _issue(staff_id, "access", _ACCESS_EXPIRE)


def create_refresh_token(staff_id: str) -> str:
    """Long-lived token exchanged at /auth/refresh (JWT_REFRESH_EXPIRE_DAYS)."""
    return _issue(staff_id, "refresh", _REFRESH_EXPIRE)


def access_token_ttl_seconds() -> int:
    return int(_ACCESS_EXPIRE.total_seconds())


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Decode a token and enforce its `type` claim.

    Raises:
        InvalidCredentialsError: bad/expired token when an access token was expected.
        InvalidRefreshTokenError: bad/expired token when a refresh token was expected.
    """
    claims: dict[str, str] = {}
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[_ALGORITHM])
    except JWTError:
        _raise_auth_error(expected_type)

    if claims.get("type") != expected_type or not claims.get("sub"):
        _raise_auth_error(expected_type)

    return claims


def _raise_auth_error(expected_type: str) -> None:
    if expected_type == "access":
        raise InvalidCredentialsError()
    raise InvalidRefreshTokenError()
