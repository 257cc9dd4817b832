from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from shared.core import auth
from shared.core.claims import UserClaims
from shared.core.config import settings
from shared.core.exceptions import ConfigurationError, CredentialExpired, CredentialInvalid

ISSUED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_token_is_valid_within_its_window():
    token = auth.create_access_token("u1", "a@x.com", "company", now=ISSUED_AT)

    claims = auth.verify_token(token, now=ISSUED_AT + timedelta(hours=1))

    assert claims == UserClaims(subject_id="u1", email="a@x.com", role="company")


def test_token_expires_after_a_day():
    token = auth.create_access_token("u1", "a@x.com", "company", now=ISSUED_AT)

    with pytest.raises(CredentialExpired):
        auth.verify_token(token, now=ISSUED_AT + timedelta(hours=25))


def test_expiry_boundary_is_exclusive():
    token = auth.create_access_token("u1", "a@x.com", "user", now=ISSUED_AT)

    with pytest.raises(CredentialExpired):
        auth.verify_token(token, now=ISSUED_AT + timedelta(minutes=settings.JWT_EXPIRE_MINUTES))


def test_token_carries_wire_claim_names():
    token = auth.create_access_token("u1", "a@x.com", "user", now=ISSUED_AT)

    payload = jwt.get_unverified_claims(token)

    assert payload["userId"] == "u1"
    assert payload["userType"] == "user"
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_foreign_signature_is_rejected():
    token = jwt.encode({"userId": "u1", "userType": "user", "exp": 4102444800},
                       "some-other-secret", algorithm="HS256")

    with pytest.raises(CredentialInvalid):
        auth.verify_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(CredentialInvalid):
        auth.verify_token("not.a.token")


def test_token_without_expiry_is_rejected():
    token = jwt.encode({"userId": "u1", "userType": "user"},
                       settings.JWT_SECRET, algorithm="HS256")

    with pytest.raises(CredentialInvalid):
        auth.verify_token(token)


def test_missing_secret_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET", "")

    with pytest.raises(ConfigurationError):
        auth.create_access_token("u1", "a@x.com", "user")
