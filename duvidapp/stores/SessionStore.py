"""Current user identity, derived from the bearer token."""

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from duvidapp.client.RemoteClient import GENERIC_MESSAGES, RemoteClient
from duvidapp.client.TokenStorage import MemoryTokenStorage, TokenStorage
from duvidapp.config.auth import decode_claims, is_expired
from duvidapp.exceptions import DuvidAppError, HttpError, NetworkError, Unauthenticated
from duvidapp.models.UserModel import RegisterResult, User, UserCreate
from duvidapp.stores.base import BaseStore

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class SessionStore(BaseStore):
    def __init__(
        self,
        client: RemoteClient,
        storage: Optional[TokenStorage] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__()
        self._client = client
        self._storage = storage if storage is not None else MemoryTokenStorage()
        self._now = now
        self._claims: Optional[dict] = None
        self.state = SessionState.ANONYMOUS
        self.user: Optional[User] = None
        self.restore()

    @property
    def storage(self) -> TokenStorage:
        return self._storage

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self.state == SessionState.AUTHENTICATING

    def _expired(self, claims: dict) -> bool:
        return is_expired(claims, self._now() if self._now else None)

    def _start(self, token: str, claims: dict) -> None:
        user = User.from_claims(claims)
        # The cached snapshot only fills in what the token does not carry
        cached = self._storage.load_user()
        if cached is not None and cached.id == user.id:
            user = user.model_copy(update={"avatar": user.avatar or cached.avatar})

        self._claims = claims
        self.user = user
        self._client.set_token(token)
        self._storage.save_token(token)
        self._storage.save_user(user)
        self.state = SessionState.AUTHENTICATED

    def restore(self) -> bool:
        """Resume a persisted session when its token is still valid"""
        token = self._storage.load_token()
        if not token:
            return False
        claims = decode_claims(token)
        if not claims or "sub" not in claims or self._expired(claims):
            logger.info("Discarding expired or unreadable session token")
            self._storage.clear()
            return False
        self._start(token, claims)
        self._emit()
        return True

    async def login(self, email: str, password: str) -> bool:
        self.state = SessionState.AUTHENTICATING
        self._emit()
        try:
            data = await self._client.post(
                "/auth/login", json={"email": email, "password": password}, auth=False
            )
            token = data.get("access_token") if isinstance(data, dict) else None
            claims = decode_claims(token) if token else None
            if not claims or self._expired(claims):
                raise HttpError(500, "Token de acesso inválido.")
            self._start(token, claims)
            logger.info("Logged in as %s", self.user.email)
            return True
        except (DuvidAppError, KeyError, ValueError) as e:
            logger.warning("Login failed for %s: %s", email, e)
            self._clear()
            return False
        finally:
            self._emit()

    async def register(self, payload: UserCreate) -> RegisterResult:
        self.state = SessionState.AUTHENTICATING
        self._emit()
        try:
            await self._client.post("/auth/register", json=payload.to_api(), auth=False)
            return RegisterResult(success=True)
        except HttpError as e:
            logger.warning("Registration failed for %s: %s", payload.email, e)
            if e.status == 409:
                if e.message in GENERIC_MESSAGES.values():
                    return RegisterResult(success=False, message="Este email já está em uso.")
                return RegisterResult(success=False, message=e.message)
            return RegisterResult(success=False, message="Ocorreu um erro inesperado ao registrar.")
        except NetworkError as e:
            return RegisterResult(success=False, message=e.message)
        finally:
            self.state = SessionState.AUTHENTICATED if self.user else SessionState.ANONYMOUS
            self._emit()

    def _clear(self) -> None:
        self._claims = None
        self.user = None
        self._client.set_token(None)
        self._storage.clear()
        self.state = SessionState.ANONYMOUS

    def logout(self) -> None:
        self._clear()
        self._emit()

    def require_user(self) -> User:
        if self.user is None or self._claims is None:
            raise Unauthenticated()
        if self._expired(self._claims):
            self.logout()
            raise Unauthenticated("Sua sessão expirou. Faça login novamente.")
        return self.user

    def update_user(self, user: User) -> None:
        self.user = user
        self._storage.save_user(user)
        self._emit()
