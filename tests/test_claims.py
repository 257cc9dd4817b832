import pytest

from shared.core.claims import UserClaims, extract_subject_id, normalize_claims
from shared.core.exceptions import CredentialInvalid, InvalidCredential


def test_mapping_is_normalized():
    claims = normalize_claims({"userId": "u1", "email": "a@x.com", "userType": "company", "exp": 1})

    assert claims == UserClaims(subject_id="u1", email="a@x.com", role="company")


def test_typed_claims_pass_through_unchanged():
    claims = UserClaims(subject_id="u1", email="a@x.com", role="user")

    assert normalize_claims(claims) is claims


def test_non_string_email_becomes_empty():
    claims = normalize_claims({"userId": "u1", "email": 42, "userType": "user"})

    assert claims.email == ""


@pytest.mark.parametrize("payload", [
    {"email": "a@x.com", "userType": "user"},
    {"userId": 7, "userType": "user"},
    {"userId": "u1", "userType": None},
    {"userId": "", "userType": "user"},
    "not-a-mapping",
    None,
])
def test_malformed_payloads_are_rejected(payload):
    with pytest.raises(InvalidCredential):
        normalize_claims(payload)


def test_invalid_credential_is_a_credential_failure():
    with pytest.raises(CredentialInvalid) as exc:
        normalize_claims({"userType": "user"})

    assert exc.value.status_code == 401


def test_subject_id_falls_back_to_legacy_key():
    assert extract_subject_id({"id": "legacy"}) == "legacy"
    assert extract_subject_id({"userId": "new", "id": "legacy"}) == "new"
    assert extract_subject_id(UserClaims(subject_id="u1", role="user")) == "u1"

    with pytest.raises(InvalidCredential):
        extract_subject_id({"email": "a@x.com"})
