from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.errors import HashingError, TokenSigningError
from app.core.security import (
    BadSignatureError,
    ExpiredTokenError,
    InvalidTokenError,
    MalformedTokenError,
    TokenService,
)
from conftest import fast_hasher

SECRET = "unit-test-secret"


@pytest.fixture
def tokens():
    return TokenService(secret_key=SECRET, algorithm="HS256", expire_minutes=60 * 24)


def test_issued_token_identifies_user(tokens):
    claims = tokens.verify(tokens.issue(42))

    assert claims.user_id == 42
    assert claims.expires_at - claims.issued_at == timedelta(hours=24)


def test_expired_token_is_rejected(tokens):
    token = tokens.issue(42, expires_delta=timedelta(seconds=-1))

    with pytest.raises(ExpiredTokenError):
        tokens.verify(token)


def test_token_signed_with_other_secret_is_rejected(tokens):
    forged = TokenService(secret_key="someone-else").issue(42)

    with pytest.raises(BadSignatureError):
        tokens.verify(forged)


def test_garbage_token_is_malformed(tokens):
    with pytest.raises(MalformedTokenError):
        tokens.verify("invalidToken")


def test_token_without_numeric_subject_is_malformed(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "not-a-number", "iat": now, "exp": now + timedelta(minutes=5)},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(MalformedTokenError):
        tokens.verify(token)


def test_all_token_failures_share_a_base_class():
    for error in (MalformedTokenError, BadSignatureError, ExpiredTokenError):
        assert issubclass(error, InvalidTokenError)


def test_password_hash_is_salted_and_verifiable():
    first = fast_hasher.hash("engine1843")
    second = fast_hasher.hash("engine1843")

    assert first != "engine1843"
    assert first != second
    assert fast_hasher.verify("engine1843", first)
    assert not fast_hasher.verify("engine1844", first)


def test_verify_against_unknown_digest_raises_hashing_error():
    with pytest.raises(HashingError):
        fast_hasher.verify("engine1843", "not-a-bcrypt-hash")


def test_password_with_nul_never_matches():
    digest = fast_hasher.hash("engine1843")

    assert fast_hasher.verify("engine\x001843", digest) is False


def test_unsupported_algorithm_raises_signing_error():
    with pytest.raises(TokenSigningError):
        TokenService(secret_key=SECRET, algorithm="NOT-AN-ALGORITHM").issue(1)
