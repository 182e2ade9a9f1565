"""Username to password-hash store backed by a flat file.

File format, one user per line:

    alice:$argon2id$v=19$m=65536,t=3,p=4$<salt>$<hash>

Usernames cannot contain ":" (HTTP Basic splits on the first one).
"""

import logging
from pathlib import Path

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

logger = logging.getLogger(__name__)

SEPARATOR = ":"


class CredentialStore:
    """In-memory credential mapping with load/save to a users file.

    Read-mostly: loaded once at startup and shared by all requests.
    """

    def __init__(
        self,
        users: dict[str, str] | None = None,
        *,
        hasher: PasswordHasher | None = None,
    ) -> None:
        """Initialize store.

        Args:
            users: Mapping of username to encoded password hash
            hasher: Password hasher (default argon2id parameters)
        """
        self._users = dict(users or {})
        self._hasher = hasher or PasswordHasher()
        # Verified against for unknown users so both paths cost one hash
        self._dummy_hash = self._hasher.hash("")

    @classmethod
    def load(cls, path: Path, *, hasher: PasswordHasher | None = None) -> "CredentialStore":
        """Load credentials from a users file.

        A missing file is the first-run case and yields an empty store.

        Args:
            path: Users file path
            hasher: Password hasher passed to the store

        Returns:
            CredentialStore with the persisted users

        Raises:
            ValueError: If a line is not "username:hash"
        """
        if not path.exists():
            logger.info(f"Users file {path} not found, starting with no users")
            return cls(hasher=hasher)

        users: dict[str, str] = {}
        # Only "\n" ends a line; usernames may hold other line-break characters
        for lineno, line in enumerate(path.read_bytes().decode("utf-8").split("\n"), 1):
            if not line.strip():
                continue
            username, sep, password_hash = line.partition(SEPARATOR)
            if not sep or not username or not password_hash:
                raise ValueError(f"{path}:{lineno}: expected 'username:hash'")
            users[username] = password_hash.rstrip("\r")

        logger.debug(f"Loaded {len(users)} users from {path}")
        return cls(users, hasher=hasher)

    def save(self, path: Path) -> None:
        """Write all credentials to the users file, replacing its content.

        Raises:
            OSError: If the file cannot be written
        """
        lines = [
            f"{username}{SEPARATOR}{password_hash}\n"
            for username, password_hash in sorted(self._users.items())
        ]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes("".join(lines).encode("utf-8"))

    def add_user(self, username: str, password: str) -> None:
        """Hash password and insert or overwrite the user.

        Raises:
            ValueError: If username is empty or contains ":" or a newline
        """
        if not username or SEPARATOR in username or "\n" in username:
            raise ValueError("Username must be non-empty and must not contain ':'")
        self._users[username] = self._hasher.hash(password)

    def authenticate(self, username: str, password: str) -> bool:
        """Check a username and password against the stored hash.

        Unknown users are verified against a placeholder hash, so they take
        the same path as a wrong password.
        """
        password_hash = self._users.get(username, self._dummy_hash)
        try:
            verified = self._hasher.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False
        return verified and username in self._users

    @property
    def usernames(self) -> list[str]:
        return sorted(self._users)

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def __len__(self) -> int:
        return len(self._users)
