from datetime import datetime, timedelta, timezone

import jwt
import pytest

from salesauth.auth_service.auth import TokenIssuer
from salesauth.auth_service.errors import (
    TokenClassMismatch,
    TokenError,
    TokenExpired,
    TokenInvalidSignature,
    TokenMalformed,
)
from salesauth_tests.conftest import ACCESS_SECRET, REFRESH_SECRET


def _tamper_signature(token: str) -> str:
    header, payload, signature = token.split(".")
    first = "B" if signature[0] != "B" else "C"
    return ".".join([header, payload, first + signature[1:]])


def test_access_token_round_trip(tokens):
    token = tokens.issue_access("user-1")
    assert tokens.verify_access(token) == "user-1"


def test_refresh_token_round_trip(tokens):
    token = tokens.issue_refresh("user-1")
    assert tokens.verify_refresh(token) == "user-1"


def test_access_and_refresh_tokens_are_not_interchangeable(tokens):
    access = tokens.issue_access("user-1")
    refresh = tokens.issue_refresh("user-1")

    with pytest.raises(TokenError):
        tokens.verify_refresh(access)
    with pytest.raises(TokenError):
        tokens.verify_access(refresh)


def test_payload_carries_only_subject_type_and_times(tokens):
    token = tokens.issue_access("user-1")
    claims = jwt.decode(token, ACCESS_SECRET, algorithms=["HS256"])
    assert set(claims) == {"sub", "type", "iat", "exp"}
    assert claims["type"] == "access"
    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())


def test_refresh_lifetime_is_thirty_days(tokens):
    token = tokens.issue_refresh("user-1")
    claims = jwt.decode(token, REFRESH_SECRET, algorithms=["HS256"])
    assert claims["exp"] - claims["iat"] == int(timedelta(days=30).total_seconds())


def test_expired_tokens_are_rejected():
    past = datetime.now(tz=timezone.utc) - timedelta(days=31)
    stale = TokenIssuer(ACCESS_SECRET, REFRESH_SECRET, clock=lambda: past)
    fresh = TokenIssuer(ACCESS_SECRET, REFRESH_SECRET)

    with pytest.raises(TokenExpired):
        fresh.verify_access(stale.issue_access("user-1"))
    with pytest.raises(TokenExpired):
        fresh.verify_refresh(stale.issue_refresh("user-1"))


def test_tampered_signature_is_rejected(tokens):
    token = _tamper_signature(tokens.issue_refresh("user-1"))
    with pytest.raises(TokenInvalidSignature):
        tokens.verify_refresh(token)


def test_forged_payload_is_rejected(tokens):
    header, _, signature = tokens.issue_access("user-1").split(".")
    forged_payload = jwt.encode(
        {"sub": "admin", "type": "access", "iat": 0, "exp": 9999999999}, "guess", algorithm="HS256"
    ).split(".")[1]
    with pytest.raises(TokenInvalidSignature):
        tokens.verify_access(".".join([header, forged_payload, signature]))


@pytest.mark.parametrize("token", ["not-a-token", "a.b", "", "a.b.c"])
def test_malformed_tokens_are_rejected(tokens, token):
    with pytest.raises(TokenMalformed):
        tokens.verify_access(token)


def test_missing_claims_are_malformed(tokens):
    token = jwt.encode({"sub": "user-1"}, ACCESS_SECRET, algorithm="HS256")
    with pytest.raises(TokenMalformed):
        tokens.verify_access(token)


def test_type_tag_is_checked_even_with_the_right_secret(tokens):
    now = datetime.now(tz=timezone.utc)
    token = jwt.encode(
        {"sub": "user-1", "type": "refresh", "iat": now, "exp": now + timedelta(minutes=5)},
        ACCESS_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenClassMismatch):
        tokens.verify_access(token)


def test_secrets_must_be_present_and_distinct():
    with pytest.raises(ValueError):
        TokenIssuer("", REFRESH_SECRET)
    with pytest.raises(ValueError):
        TokenIssuer(ACCESS_SECRET, ACCESS_SECRET)
