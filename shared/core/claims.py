from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from shared.core.exceptions import InvalidCredential


class UserClaims(BaseModel):
    """Normalized identity carried by a session token."""

    subject_id: str
    email: str = ""
    role: str

    model_config = {"frozen": True}

    def to_payload(self) -> dict:
        return {"userId": self.subject_id, "email": self.email, "userType": self.role}


def _required_string(payload: Mapping, key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidCredential(f"Invalid '{key}' in token")
    return value


def normalize_claims(payload: Any) -> UserClaims:
    """
    Accepts either an already typed UserClaims or the raw string-keyed
    mapping decoded from a token, and returns UserClaims.
    """
    if isinstance(payload, UserClaims):
        return payload

    if not isinstance(payload, Mapping):
        raise InvalidCredential("Unsupported token payload")

    email = payload.get("email")
    return UserClaims(
        subject_id=_required_string(payload, "userId"),
        email=email if isinstance(email, str) else "",
        role=_required_string(payload, "userType"),
    )


def extract_subject_id(payload: Any) -> str:
    if isinstance(payload, UserClaims):
        return payload.subject_id

    if not isinstance(payload, Mapping):
        raise InvalidCredential("Unsupported token payload")

    # Older tokens carry the subject under "id"
    for key in ("userId", "id"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value

    raise InvalidCredential("Invalid user ID in token")
