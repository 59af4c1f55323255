"""Password hashing."""

import bcrypt

from app.config import get_settings


class PasswordHasher:
    """Salted bcrypt hashing with a fixed work factor."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a password. Each call uses a fresh salt."""
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash. Never raises for a mismatch."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False

    def burn(self, password: str) -> None:
        """Run a verification against a throwaway hash.

        Used when no principal matches so unknown emails cost about as much as
        wrong passwords.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("not-a-real-password")
        self.verify(password, self._dummy_hash)


_password_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get singleton password hasher configured from settings."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher(rounds=get_settings().BCRYPT_ROUNDS)
    return _password_hasher
