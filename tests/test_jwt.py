"""Token issue/verify tests.

Learn: Covers the ways a token can go bad (expiry, tampering, wrong
secret, algorithm substitution, missing or malformed claims) and checks
they all surface as the same InvalidTokenError.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from bookshelf.auth.jwt import INVALID_TOKEN_MESSAGE, InvalidTokenError, TokenCodec

SECRET = "unit-test-secret-0123456789-abcdefghijkl"


@pytest.fixture()
def codec():
    return TokenCodec(secret=SECRET)


def _future_exp() -> int:
    return int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())


# ═══════════════════════════════════════════════════════════
# Happy path
# ═══════════════════════════════════════════════════════════


def test_issue_then_verify_returns_subject(codec):
    token = codec.issue(42)
    assert codec.verify(token) == 42


def test_payload_shape_and_lifetime(codec):
    token = codec.issue(7)
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert payload["user_id"] == 7
    assert payload["exp"] - payload["iat"] == 24 * 3600
    assert jwt.get_unverified_header(token)["alg"] == "HS256"


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        TokenCodec(secret="")


# ═══════════════════════════════════════════════════════════
# Rejections
# ═══════════════════════════════════════════════════════════


def test_expired_token_rejected(codec):
    past = datetime.now(timezone.utc) - timedelta(hours=25)
    old_codec = TokenCodec(secret=SECRET, clock=lambda: past)
    token = old_codec.issue(42)

    with pytest.raises(InvalidTokenError):
        codec.verify(token)


def test_tampered_signature_rejected(codec):
    header, payload, signature = codec.issue(42).split(".")
    flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

    with pytest.raises(InvalidTokenError):
        codec.verify(f"{header}.{payload}.{flipped}")


def test_tampered_payload_rejected(codec):
    other = codec.issue(99).split(".")[1]
    header, _, signature = codec.issue(42).split(".")

    with pytest.raises(InvalidTokenError):
        codec.verify(f"{header}.{other}.{signature}")


def test_wrong_secret_rejected(codec):
    token = TokenCodec(secret="some-other-secret-0123456789-abcdefgh").issue(42)
    with pytest.raises(InvalidTokenError):
        codec.verify(token)


def test_alg_none_rejected(codec):
    """Unsigned token claiming alg=none never gets through."""
    token = jwt.encode({"user_id": 42, "exp": _future_exp()}, "", algorithm="none")
    with pytest.raises(InvalidTokenError):
        codec.verify(token)


def test_different_hmac_algorithm_rejected(codec):
    """Same secret, different algorithm — still rejected."""
    token = jwt.encode({"user_id": 42, "exp": _future_exp()}, SECRET, algorithm="HS512")
    with pytest.raises(InvalidTokenError):
        codec.verify(token)


def test_missing_user_id_rejected(codec):
    token = jwt.encode({"exp": _future_exp()}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        codec.verify(token)


def test_missing_exp_rejected(codec):
    token = jwt.encode({"user_id": 42}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        codec.verify(token)


@pytest.mark.parametrize("user_id", ["42", True, 0, -3, 4.2, None])
def test_bad_user_id_claim_rejected(codec, user_id):
    token = jwt.encode(
        {"user_id": user_id, "exp": _future_exp()}, SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidTokenError):
        codec.verify(token)


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c", "...."])
def test_garbage_rejected(codec, garbage):
    with pytest.raises(InvalidTokenError):
        codec.verify(garbage)


def test_every_failure_has_the_same_message(codec):
    past = datetime.now(timezone.utc) - timedelta(hours=25)
    expired = TokenCodec(secret=SECRET, clock=lambda: past).issue(1)
    forged = TokenCodec(secret="another-secret-0123456789-abcdefghijk").issue(1)

    messages = set()
    for token in (expired, forged, "garbage"):
        with pytest.raises(InvalidTokenError) as exc_info:
            codec.verify(token)
        messages.add(str(exc_info.value))
    assert messages == {INVALID_TOKEN_MESSAGE}
