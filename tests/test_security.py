import pytest
from jose import jwt

from equipment_tracker.core.access import Role
from equipment_tracker.core.security import (
    ALGORITHM,
    AUDIENCE,
    ISSUER,
    decode_token,
    hash_password,
    issue_token_pair,
    verify_password,
)


def test_password_round_trip():
    hashed = hash_password("admin123")
    assert hashed.startswith("$2")
    assert verify_password("admin123", hashed)
    assert not verify_password("admin124", hashed)
    assert not verify_password("admin123", "")
    assert not verify_password("admin123", "not-a-bcrypt-hash")


def test_access_token_carries_identity():
    pair = issue_token_pair(42, "admin", username="root", name="Root")
    payload = decode_token(pair.access_token, verify_type="access")
    assert payload.sub == "42"
    assert payload.role is Role.ADMIN
    assert payload.username == "root"
    caller = payload.to_caller()
    assert caller.id == 42 and caller.is_admin


def test_token_type_is_enforced():
    pair = issue_token_pair(1, "user")
    with pytest.raises(ValueError):
        decode_token(pair.refresh_token, verify_type="access")
    assert decode_token(pair.refresh_token, verify_type="refresh").sub == "1"


def test_token_signed_with_another_secret_is_rejected():
    forged = jwt.encode(
        {"sub": "1", "role": "admin", "typ": "access", "aud": AUDIENCE, "iss": ISSUER, "iat": 0, "exp": 4102444800},
        "someone-elses-secret",
        algorithm=ALGORITHM,
    )
    with pytest.raises(ValueError):
        decode_token(forged)
