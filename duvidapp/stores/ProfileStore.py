import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from duvidapp.client.RemoteClient import RemoteClient
from duvidapp.exceptions import DuvidAppError, ValidationError
from duvidapp.models.UserModel import User, UserUpdate
from duvidapp.stores.NotificationCenter import NotificationCenter
from duvidapp.stores.SessionStore import SessionStore
from duvidapp.stores.base import NotifyingStore

logger = logging.getLogger(__name__)


class ProfileStore(NotifyingStore):
    def __init__(self, client: RemoteClient, session: SessionStore, notifications: NotificationCenter):
        super().__init__(notifications)
        self._client = client
        self._session = session
        self.is_loading = False
        self.error: Optional[str] = None
        self.success: Optional[str] = None

    @property
    def profile(self) -> Optional[User]:
        return self._session.user

    async def update_profile(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        currentPassword: Optional[str] = None,
    ) -> bool:
        try:
            payload = UserUpdate(name=name, email=email, password=password, currentPassword=currentPassword)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        self.error = None
        self.success = None
        self.is_loading = True
        self._emit()
        try:
            user = self._session.require_user()
            data = await self._client.put(f"/user/{user.id}", json=payload.model_dump(exclude_none=True))
            updated = User.model_validate({**user.model_dump(), **(data or {})})
        except PydanticValidationError as e:
            logger.warning("Ignoring malformed profile response: %s", e)
            updated = user.model_copy(update=payload.model_dump(include={"name", "email"}, exclude_none=True))
        except DuvidAppError as e:
            self.error = e.message
            return self._fail("update_profile", e)
        finally:
            self.is_loading = False
            self._emit()

        self._session.update_user(updated)
        self.success = "Perfil atualizado com sucesso!"
        return self._succeed(self.success)
