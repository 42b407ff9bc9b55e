"""Password hashing: salted, self-describing, never plaintext."""

from gatehouse.auth.password import PasswordHasher

hasher = PasswordHasher(rounds=4)


def test_hash_is_not_plaintext():
    h = hasher.hash("Secr3t!")
    assert h != "Secr3t!"
    assert "Secr3t!" not in h


def test_hash_embeds_cost_and_salt():
    h = hasher.hash("Secr3t!")
    assert h.startswith("$2b$04$")
    # Self-describing: a hasher with a different cost still verifies it
    assert PasswordHasher(rounds=5).verify("Secr3t!", h)


def test_same_password_hashes_differently():
    """Random salt per hash."""
    assert hasher.hash("same-password") != hasher.hash("same-password")


def test_different_passwords_hash_differently():
    assert hasher.hash("password-one") != hasher.hash("password-two")


def test_verify_roundtrip():
    h = hasher.hash("correct horse")
    assert hasher.verify("correct horse", h) is True
    assert hasher.verify("wrong horse", h) is False


def test_verify_never_raises_on_garbage_hash():
    assert hasher.verify("anything", "not-a-bcrypt-hash") is False
    assert hasher.verify("anything", "") is False


def test_verify_dummy_always_false():
    assert hasher.verify_dummy("gatehouse-dummy-password") is False


def test_long_passwords_truncated_at_72_bytes():
    base = "x" * 72
    h = hasher.hash(base + "tail-one")
    assert hasher.verify(base + "tail-two", h)
