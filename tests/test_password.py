"""Password hashing tests."""

import pytest

from bookshelf.auth.password import MAX_PASSWORD_BYTES, PasswordHasher


@pytest.fixture()
def hasher():
    return PasswordHasher(rounds=4)


def test_hash_then_verify(hasher):
    digest = hasher.hash("secret1")
    assert digest.startswith("$2")
    assert digest != "secret1"
    assert hasher.verify("secret1", digest) is True


def test_same_password_different_digests(hasher):
    """Fresh salt per call — digests differ, both still verify."""
    a = hasher.hash("secret1")
    b = hasher.hash("secret1")
    assert a != b
    assert hasher.verify("secret1", a)
    assert hasher.verify("secret1", b)


def test_wrong_password_rejected(hasher):
    digest = hasher.hash("secret1")
    assert hasher.verify("secret2", digest) is False
    assert hasher.verify("", digest) is False


@pytest.mark.parametrize("bad_digest", ["", "not-a-bcrypt-hash", "$2b$04$short"])
def test_malformed_digest_fails_closed(hasher, bad_digest):
    assert hasher.verify("secret1", bad_digest) is False


def test_non_string_digest_fails_closed(hasher):
    assert hasher.verify("secret1", None) is False


def test_dummy_verify_is_always_false(hasher):
    assert hasher.dummy_verify("anything") is False
    assert hasher.dummy_verify("") is False


def test_unicode_password(hasher):
    digest = hasher.hash("pässwörd-ü")
    assert hasher.verify("pässwörd-ü", digest)
    assert not hasher.verify("passwort-u", digest)


def test_cost_factor_is_encoded_in_digest():
    digest = PasswordHasher(rounds=5).hash("secret1")
    assert digest.split("$")[2] == "05"


# ═══════════════════════════════════════════════════════════
# 72-byte bcrypt limit
# ═══════════════════════════════════════════════════════════


def test_longest_allowed_password(hasher):
    password = "x" * MAX_PASSWORD_BYTES
    digest = hasher.hash(password)
    assert hasher.verify(password, digest)
    assert not hasher.verify("x" * (MAX_PASSWORD_BYTES - 1), digest)


def test_over_long_password_cannot_be_hashed(hasher):
    with pytest.raises(ValueError):
        hasher.hash("x" * (MAX_PASSWORD_BYTES + 1))


def test_multibyte_length_counts_bytes(hasher):
    # 37 characters, 74 bytes
    with pytest.raises(ValueError):
        hasher.hash("é" * 37)


def test_shared_prefix_does_not_verify(hasher):
    """Only the first 72 bytes reach bcrypt, so longer input never matches."""
    digest = hasher.hash("x" * MAX_PASSWORD_BYTES)
    assert hasher.verify("x" * MAX_PASSWORD_BYTES + "guess", digest) is False


def test_dummy_verify_handles_over_long_password(hasher):
    assert hasher.dummy_verify("y" * 500) is False


def test_dummy_digest_built_up_front():
    hasher = PasswordHasher(rounds=4)
    assert hasher._dummy_hash.startswith(b"$2")
