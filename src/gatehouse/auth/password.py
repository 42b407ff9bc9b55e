"""Password hashing.

Learn: bcrypt includes a random salt automatically and produces
self-describing hashes ("$2b$<cost>$<salt+digest>"), so verification
needs nothing but the stored string. The work factor is fixed when the
hasher is built; 12 rounds is ~100ms per hash on modern hardware.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """One-way password hashing with a fixed bcrypt cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Used to burn the same time on logins for unknown emails.
        self._dummy_hash = self.hash("gatehouse-dummy-password")

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash.

        Never raises: a mismatch or an unparseable hash is just False.
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def verify_dummy(self, password: str) -> bool:
        """Run a full verification that always fails."""
        self.verify(password, self._dummy_hash)
        return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]
