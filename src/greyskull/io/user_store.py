"""
JSON-file storage for users.

Each user is one JSON document under ``<config dir>/users/``, named after the
lowercased username so lookups are case-insensitive while the document keeps
the original casing. ``current_user.txt`` holds the active username.
"""

import logging
import os
import tempfile
from pathlib import Path

from ..core.config import APP_DIR_NAME, CURRENT_USER_FILE, PROGRAMS_DIR_NAME, USERS_DIR_NAME
from ..core.models import User
from .serializers import ValidationError, user_from_json, user_to_json, validate_username

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for user store errors."""


class UserNotFoundError(StoreError, LookupError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"user {username!r} not found")


class UserAlreadyExistsError(StoreError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"user {username!r} already exists (case-insensitive)")


class NoCurrentUserError(StoreError, LookupError):
    def __init__(self) -> None:
        super().__init__("no current user set")


class UserStore:
    """
    Manages user records stored as JSON files.

    Layout under config_dir:
    - users/<username lowercased>.json: one document per user
    - current_user.txt: the active username, original casing
    - programs/: optional user program YAML overrides
    """

    def __init__(self, config_dir: str | Path):
        """
        Initialize the store.

        Args:
            config_dir: Root directory for greyskull data
        """
        self.config_dir = Path(config_dir)
        self.users_dir = self.config_dir / USERS_DIR_NAME
        self.current_path = self.config_dir / CURRENT_USER_FILE
        self.programs_dir = self.config_dir / PROGRAMS_DIR_NAME

    def init(self) -> None:
        """Create the directory structure if needed."""
        self.users_dir.mkdir(parents=True, exist_ok=True)

    def _user_path(self, username: str) -> Path:
        """
        Map a username to its document path inside users/.

        Raises:
            ValidationError: The name is not a valid username (e.g. holds a path separator)
        """
        return self.users_dir / f"{validate_username(username).lower()}.json"

    def exists(self, username: str) -> bool:
        """Check whether a user exists (case-insensitive)."""
        return self._user_path(username).exists()

    def create(self, user: User) -> None:
        """
        Save a new user.

        Raises:
            UserAlreadyExistsError: A user with the same name (any casing) exists
        """
        self.init()
        if self.exists(user.username):
            raise UserAlreadyExistsError(user.username)
        self._write_user(user)
        logger.debug("Created user %s", user.username)

    def get(self, username: str) -> User:
        """
        Load a user by name (case-insensitive).

        Raises:
            UserNotFoundError: No such user
            ValidationError: Invalid username, or the stored document is corrupt
        """
        path = self._user_path(username)
        if not path.exists():
            raise UserNotFoundError(username)
        return self._read_user(path)

    def update(self, user: User) -> None:
        """
        Overwrite an existing user.

        Raises:
            UserNotFoundError: No such user
        """
        if not self.exists(user.username):
            raise UserNotFoundError(user.username)
        self._write_user(user)
        logger.debug("Saved user %s", user.username)

    def list_usernames(self) -> list[str]:
        """
        Return all usernames in their original casing, sorted.

        Unreadable documents are skipped with a warning.
        """
        if not self.users_dir.exists():
            return []

        usernames: list[str] = []
        for path in sorted(self.users_dir.glob("*.json")):
            try:
                usernames.append(self._read_user(path).username)
            except (OSError, ValidationError) as e:
                logger.warning("Skipping unreadable user file %s: %s", path, e)
        return sorted(usernames, key=str.lower)

    def get_current(self) -> str:
        """
        Return the active username.

        Raises:
            NoCurrentUserError: None set, not a valid name, or the user no longer exists
        """
        if not self.current_path.exists():
            raise NoCurrentUserError()
        username = self.current_path.read_text(encoding="utf-8").strip()
        try:
            found = bool(username) and self.exists(username)
        except ValidationError:
            found = False
        if not found:
            raise NoCurrentUserError()
        return username

    def set_current(self, username: str) -> User:
        """
        Make a user the active one, storing the original casing.

        Returns:
            The loaded user

        Raises:
            UserNotFoundError: No such user
            ValidationError: Invalid username
        """
        user = self.get(username)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        _atomic_write(self.current_path, user.username)
        return user

    def load_current_user(self) -> User:
        """
        Load the active user.

        Raises:
            NoCurrentUserError: No active user
        """
        return self.get(self.get_current())

    def _read_user(self, path: Path) -> User:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        try:
            return user_from_json(text)
        except ValidationError as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e

    def _write_user(self, user: User) -> None:
        _atomic_write(self._user_path(user.username), user_to_json(user) + "\n")


def _atomic_write(path: Path, text: str) -> None:
    """Write text to path via a temp file in the same directory."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def get_default_config_dir() -> Path:
    """
    Get the default data directory.

    Order: $GREYSKULL_HOME, then $XDG_CONFIG_HOME/greyskull, then
    ~/.config/greyskull.
    """
    override = os.environ.get("GREYSKULL_HOME")
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME
