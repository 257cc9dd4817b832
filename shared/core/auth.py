from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from shared.core.claims import UserClaims, extract_subject_id, normalize_claims
from shared.core.config import settings
from shared.core.exceptions import (
    ConfigurationError,
    CredentialExpired,
    CredentialInvalid,
    Forbidden,
    Unauthorized,
)

security = HTTPBearer(auto_error=False)


def _signing_secret() -> str:
    # Never issue or accept unsigned tokens
    if not settings.JWT_SECRET:
        raise ConfigurationError("JWT secret is not configured")
    return settings.JWT_SECRET


def create_access_token(subject_id: str, email: str, role: str, now: Optional[datetime] = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    expires = issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    payload = {
        "userId": subject_id,
        "email": email,
        "userType": role,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, _signing_secret(), algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, now: Optional[datetime] = None) -> dict:
    """Check signature and expiry and return the raw payload."""
    secret = _signing_secret()
    try:
        # expiry is checked below against an injectable clock
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM],
                             options={"verify_exp": False})
    except JWTError:
        raise CredentialInvalid("Invalid or malformed token")

    expires_at = payload.get("exp")
    if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
        raise CredentialInvalid("Token has no expiry")

    current = now or datetime.now(timezone.utc)
    if current.timestamp() >= expires_at:
        raise CredentialExpired("Token has expired")

    return payload


def verify_token(token: str, now: Optional[datetime] = None) -> UserClaims:
    return normalize_claims(decode_token(token, now))


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Missing or malformed bearer token")
    return credentials.credentials


def validate_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserClaims:
    return verify_token(_bearer_token(credentials))


def get_current_subject_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    return extract_subject_id(decode_token(_bearer_token(credentials)))


def require_user_type(*allowed_types: str):
    def checker(current_user: UserClaims = Depends(validate_current_token)) -> UserClaims:
        if current_user.role not in allowed_types:
            raise Forbidden("Access denied for your user type")
        return current_user

    return checker
