import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from duvidapp.models.UserModel import User

logger = logging.getLogger(__name__)


class TokenStorage(ABC):
    """Persisted session state: the bearer token and a cached user snapshot"""

    @abstractmethod
    def load_token(self) -> Optional[str]:
        ...

    @abstractmethod
    def save_token(self, token: str) -> None:
        ...

    @abstractmethod
    def load_user(self) -> Optional[User]:
        ...

    @abstractmethod
    def save_user(self, user: User) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemoryTokenStorage(TokenStorage):
    def __init__(self, token: Optional[str] = None, user: Optional[User] = None):
        self.token = token
        self.user = user

    def load_token(self) -> Optional[str]:
        return self.token

    def save_token(self, token: str) -> None:
        self.token = token

    def load_user(self) -> Optional[User]:
        return self.user

    def save_user(self, user: User) -> None:
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None


class FileTokenStorage(TokenStorage):
    """JSON file with `access_token` and `currentUser` keys"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Discarding unreadable session file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def load_token(self) -> Optional[str]:
        return self._read().get("access_token")

    def save_token(self, token: str) -> None:
        data = self._read()
        data["access_token"] = token
        self._write(data)

    def load_user(self) -> Optional[User]:
        raw = self._read().get("currentUser")
        if not raw:
            return None
        try:
            return User.model_validate(raw)
        except ValueError:
            return None

    def save_user(self, user: User) -> None:
        data = self._read()
        data["currentUser"] = user.model_dump()
        self._write(data)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
