"""Tests for password hashing, session tokens and Google credentials."""

from datetime import timedelta

import pytest
from jose import jwt

from vibeshare.core.exceptions import AuthError
from vibeshare.core.security import (
    REFRESH_TOKEN,
    create_access_token,
    decode_google_credential,
    get_password_hash,
    issue_token_pair,
    verify_password,
    verify_token,
)


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_password_less_account_never_matches():
    assert not verify_password("anything", None)


def test_token_pair_verifies_to_user_id():
    tokens = issue_token_pair(42)
    assert verify_token(tokens["accessToken"]) == 42
    assert verify_token(tokens["refreshToken"], REFRESH_TOKEN) == 42


def test_refresh_token_is_not_an_access_token():
    tokens = issue_token_pair(7)
    with pytest.raises(AuthError):
        verify_token(tokens["refreshToken"])
    with pytest.raises(AuthError):
        verify_token(tokens["accessToken"], REFRESH_TOKEN)


def test_expired_token_is_rejected():
    token = create_access_token(1, expires_delta=timedelta(seconds=-5))
    with pytest.raises(AuthError):
        verify_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(AuthError):
        verify_token("not-a-jwt")


def _google_credential(**claims):
    return jwt.encode(claims, "google-signing-key", algorithm="HS256")


def test_google_credential_claims_are_extracted():
    credential = _google_credential(
        sub="g-123", email="ana@example.com", name="Ana Lima", picture="https://img/ana.png", email_verified=True
    )
    identity = decode_google_credential(credential)
    assert identity["google_id"] == "g-123"
    assert identity["email"] == "ana@example.com"
    assert identity["name"] == "Ana Lima"
    assert identity["email_verified"] is True


def test_google_credential_requires_verified_email():
    credential = _google_credential(sub="g-123", email="ana@example.com", email_verified=False)
    with pytest.raises(AuthError):
        decode_google_credential(credential)


@pytest.mark.parametrize("flag", ["false", "False", "yes", 1])
def test_google_credential_only_trusts_boolean_true(flag):
    credential = _google_credential(sub="g-123", email="ana@example.com", email_verified=flag)
    with pytest.raises(AuthError, match="email not verified"):
        decode_google_credential(credential)


def test_google_credential_without_verified_claim_is_rejected():
    credential = _google_credential(sub="g-123", email="ana@example.com")
    with pytest.raises(AuthError):
        decode_google_credential(credential)


def test_google_credential_must_be_a_jwt():
    with pytest.raises(AuthError):
        decode_google_credential("definitely not a token")
