"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor (rounds=14) takes ~1s per hash on modern hardware,
slow on purpose. Tests drop it to 4 via BOOKSHELF_BCRYPT_ROUNDS.

bcrypt only ever looks at the first 72 bytes of its input, so two
passwords sharing those bytes would hash alike. Longer passwords are
refused outright: hash() raises, verify() returns False.

verify() never raises and takes the same time whether the password is
wrong or the stored digest is garbage: a malformed digest still pays for
a full bcrypt comparison against a dummy digest before returning False.
"""

import bcrypt

MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    """bcrypt hash/verify with a fixed cost factor."""

    def __init__(self, rounds: int = 14):
        self.rounds = rounds
        # Built up front so the first dummy_verify costs the same as the rest
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=rounds))

    def hash(self, password: str) -> str:
        """Hash a password. Same input → different digest every call (fresh salt).

        Raises ValueError for passwords over MAX_PASSWORD_BYTES.
        """
        if password_too_long(password):
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored digest. Fails closed."""
        if password_too_long(password):
            return self.dummy_verify(password)
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return self.dummy_verify(password)

    def dummy_verify(self, password: str) -> bool:
        """Burn one full-cost comparison and return False.

        Used when there is no real digest to check (unknown username,
        malformed stored hash, oversized password) so the caller can't
        time the difference.
        """
        candidate = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
        bcrypt.checkpw(candidate, self._dummy_hash)
        return False
