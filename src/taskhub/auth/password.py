"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt generates a fresh
salt per hash and embeds it in the output ("$2b$<rounds>$<salt><digest>"),
so hashing the same password twice gives two different strings.
checkpw() re-derives the digest with the embedded salt and compares in
constant time.

The work factor is configuration (TASKHUB_BCRYPT_ROUNDS, default 10).
Each +1 doubles the cost. Hashing is CPU-bound and slow on purpose, so
request handlers call it through run_in_threadpool.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes of input.
_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """One-way salted hashing with a fixed cost factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        # Verified against when the account doesn't exist, so a login for
        # an unknown email costs the same as one with a wrong password.
        self._dummy_hash = self.hash("taskhub-timing-equalizer")

    def hash(self, password: str) -> str:
        pw_bytes = password.encode("utf-8")[:_MAX_PASSWORD_BYTES]
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash.

        A malformed or empty hash is a mismatch, never an error.
        """
        if not password_hash:
            return False
        try:
            pw_bytes = password.encode("utf-8")[:_MAX_PASSWORD_BYTES]
            return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def burn(self, password: str) -> None:
        """Spend one verify's worth of CPU without a real hash."""
        self.verify(password, self._dummy_hash)
