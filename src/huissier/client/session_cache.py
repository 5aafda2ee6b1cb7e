"""
Client-side session storage.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from huissier.domain.entities.session import AuthSession
from huissier.infrastructure.monitoring import get_logger

logger = get_logger(__name__)


class SessionCache(ABC):
    """Where the client keeps its current session."""

    @abstractmethod
    def get(self) -> Optional[AuthSession]:
        """Return cached session, if any."""

    @abstractmethod
    def set(self, session: AuthSession) -> None:
        """Store session, replacing any previous one."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the session."""


class InMemorySessionCache(SessionCache):
    """Process-local session cache."""

    def __init__(self):
        self._session: Optional[AuthSession] = None

    def get(self) -> Optional[AuthSession]:
        return self._session

    def set(self, session: AuthSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionCache(SessionCache):
    """
    JSON file session cache.

    Loads once at construction, persists on every set and deletes the file
    on clear. A corrupt file is treated as no session.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._session: Optional[AuthSession] = self._load()

    def get(self) -> Optional[AuthSession]:
        return self._session

    def set(self, session: AuthSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(session.to_dict(), f)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)
        self._session = session

    def clear(self) -> None:
        self._session = None
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def _load(self) -> Optional[AuthSession]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r") as f:
                return AuthSession.from_dict(json.load(f))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable session cache {self.path}: {e}")
            return None
