import pytest

from salesauth.auth_service.errors import HashFormatError


def test_hash_is_salted_and_both_hashes_verify(hasher):
    first = hasher.hash("secret123")
    second = hasher.hash("secret123")

    assert first != second
    assert "secret123" not in first
    assert hasher.verify("secret123", first)
    assert hasher.verify("secret123", second)


def test_verify_rejects_other_password(hasher):
    stored = hasher.hash("secret123")
    assert hasher.verify("secret124", stored) is False
    assert hasher.verify("", stored) is False


@pytest.mark.parametrize("corrupted", ["not-a-hash", "$pbkdf2-sha256$broken", ""])
def test_verify_raises_on_corrupted_hash(hasher, corrupted):
    with pytest.raises(HashFormatError):
        hasher.verify("secret123", corrupted)


def test_dummy_verify_never_succeeds(hasher):
    assert hasher.dummy_verify() is False


def test_verify_oversized_password_is_a_mismatch(hasher):
    stored = hasher.hash("secret123")
    assert hasher.verify("x" * 5000, stored) is False
