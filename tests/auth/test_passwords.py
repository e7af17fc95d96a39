"""Tests for topichub/auth/passwords.py."""

from topichub.auth.passwords import hash_password, verify_password


def test_hash_round_trip():
    hashed = hash_password("hunter22", rounds=4)

    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed) is True
    assert verify_password("hunter23", hashed) is False


def test_hashes_are_salted():
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)


def test_missing_hash_never_matches():
    assert verify_password("anything", None) is False
    assert verify_password("anything", "") is False


def test_malformed_hash_never_matches():
    assert verify_password("anything", "not-a-bcrypt-hash") is False
