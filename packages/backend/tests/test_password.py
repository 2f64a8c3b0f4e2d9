"""Password hashing — bcrypt salts, verification, failure modes."""

import pytest

from inkwell.auth.password import hash_password, verify_password
from inkwell.errors import HashingFailure


def test_hash_is_bcrypt_and_not_plaintext():
    h = hash_password("pw123", rounds=4)
    assert h.startswith("$2b$04$")
    assert "pw123" not in h


def test_same_password_gets_different_salts():
    assert hash_password("pw123", rounds=4) != hash_password("pw123", rounds=4)


def test_verify_correct_and_wrong_password():
    h = hash_password("pw123", rounds=4)
    assert verify_password("pw123", h) is True
    assert verify_password("wrongpw", h) is False


def test_verify_corrupt_hash_is_false():
    assert verify_password("pw123", "not-a-bcrypt-hash") is False
    assert verify_password("pw123", "") is False


def test_only_first_72_bytes_count():
    base = "x" * 72
    h = hash_password(base + "tail-one", rounds=4)
    assert verify_password(base + "tail-two", h) is True


def test_bad_cost_factor_raises_hashing_failure():
    with pytest.raises(HashingFailure):
        hash_password("pw123", rounds=2)
