"""Unit tests for password hashing utilities."""

from src.bo_gateway.auth.password import hash_password, verify_password


def test_hash_is_not_plain():
    hashed = hash_password("MySecret1")
    assert hashed != "MySecret1"
    assert len(hashed) > 20


def test_verify_correct_password():
    hashed = hash_password("MySecret1")
    assert verify_password("MySecret1", hashed) is True


def test_verify_wrong_password():
    hashed = hash_password("MySecret1")
    assert verify_password("WrongPass9", hashed) is False


def test_same_plain_produces_different_hashes():
    # bcrypt uses random salt each time
    assert hash_password("MySecret1") != hash_password("MySecret1")


def test_missing_hash_never_matches():
    assert verify_password("anything", None) is False
    assert verify_password("anything", "") is False


def test_malformed_hash_is_a_mismatch():
    assert verify_password("MySecret1", "not-a-bcrypt-hash") is False
