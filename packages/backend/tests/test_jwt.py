"""Session tokens — issuance, expiry, signature and algorithm checks, claims."""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from inkwell.auth.jwt import SessionTokenService, TokenClaims
from inkwell.errors import InvalidOrExpiredToken, MalformedClaims

SECRET = "unit-test-secret-0123456789-abcdefghijklmnop"


@pytest.fixture()
def tokens():
    return SessionTokenService(secret=SECRET)


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _future_exp() -> int:
    return int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())


def test_issued_token_validates(tokens):
    token, expires_at = tokens.issue(user_id=7, username="alice")
    claims = tokens.decode(token)
    assert isinstance(claims, TokenClaims)
    assert claims.user_id == 7
    assert claims.username == "alice"
    assert claims.exp == int(expires_at.timestamp())


def test_validity_window_is_24_hours(tokens):
    now = datetime.now(timezone.utc)
    _, expires_at = tokens.issue(user_id=1, username="alice", now=now)
    assert expires_at - now == timedelta(hours=24)


def test_expired_token_rejected(tokens):
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    token, _ = tokens.issue(user_id=1, username="alice", now=issued)
    with pytest.raises(InvalidOrExpiredToken):
        tokens.decode(token)


def test_token_from_other_secret_rejected(tokens):
    other = SessionTokenService(secret="a-completely-different-secret-value-0987654321")
    token, _ = other.issue(user_id=1, username="alice")
    with pytest.raises(InvalidOrExpiredToken):
        tokens.decode(token)


def test_unsigned_none_algorithm_rejected(tokens):
    header = _b64({"alg": "none", "typ": "JWT"})
    payload = _b64({"user_id": 1, "username": "alice", "exp": _future_exp()})
    with pytest.raises(InvalidOrExpiredToken):
        tokens.decode(f"{header}.{payload}.")


def test_non_hmac_algorithm_header_rejected(tokens):
    # An RS256 header with an HMAC signature over it: the classic
    # algorithm-confusion forgery.
    header = _b64({"alg": "RS256", "typ": "JWT"})
    payload = _b64({"user_id": 1, "username": "alice", "exp": _future_exp()})
    forged = jwt.encode(
        {"user_id": 1, "username": "alice", "exp": _future_exp()},
        SECRET,
        algorithm="HS256",
    )
    signature = forged.rsplit(".", 1)[1]
    with pytest.raises(InvalidOrExpiredToken):
        tokens.decode(f"{header}.{payload}.{signature}")


def test_other_hmac_variant_with_same_secret_accepted(tokens):
    token = jwt.encode(
        {"user_id": 3, "username": "carol", "exp": _future_exp()},
        SECRET,
        algorithm="HS512",
    )
    assert tokens.decode(token).user_id == 3


def test_garbage_token_rejected(tokens):
    with pytest.raises(InvalidOrExpiredToken):
        tokens.decode("not.a.jwt")


def test_token_without_exp_rejected(tokens):
    token = jwt.encode({"user_id": 1, "username": "alice"}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidOrExpiredToken):
        tokens.decode(token)


def test_fractional_exp_accepted(tokens):
    exp = _future_exp() + 0.5
    token = jwt.encode(
        {"user_id": 4, "username": "dave", "exp": exp}, SECRET, algorithm="HS256"
    )
    claims = tokens.decode(token)
    assert claims.user_id == 4
    assert claims.exp == exp


@pytest.mark.parametrize(
    "claims",
    [
        {"username": "alice"},
        {"user_id": 1},
        {"user_id": "1", "username": "alice"},
        {"user_id": 1.5, "username": "alice"},
        {"user_id": 1, "username": 42},
    ],
)
def test_missing_or_mistyped_claims_rejected(tokens, claims):
    token = jwt.encode({**claims, "exp": _future_exp()}, SECRET, algorithm="HS256")
    with pytest.raises(MalformedClaims):
        tokens.decode(token)


def test_only_hmac_algorithms_can_sign():
    with pytest.raises(ValueError):
        SessionTokenService(secret=SECRET, algorithm="RS256")
