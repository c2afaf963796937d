from typing import Optional

from duvidapp.client.RemoteClient import RemoteClient
from duvidapp.client.TokenStorage import FileTokenStorage, TokenStorage
from duvidapp.config.settings import Settings, settings as default_settings
from duvidapp.stores.AnswerStore import AnswerStore
from duvidapp.stores.NotificationCenter import NotificationCenter
from duvidapp.stores.ProfileStore import ProfileStore
from duvidapp.stores.QuestionStore import QuestionStore
from duvidapp.stores.SessionStore import SessionStore


class DuvidApp:
    """Wires the stores together and owns the HTTP client.

    The UI layer receives this object (or individual stores) by reference:

        async with DuvidApp() as app:
            if await app.session.login(email, password):
                await app.questions.refetch()
    """

    def __init__(
        self,
        client: Optional[RemoteClient] = None,
        storage: Optional[TokenStorage] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or default_settings
        self.client = client or RemoteClient(base_url=settings.api_url, timeout=settings.request_timeout)
        self.notifications = NotificationCenter(duration=settings.toast_duration)
        self.session = SessionStore(self.client, storage if storage is not None else FileTokenStorage(settings.token_file))
        self.questions = QuestionStore(self.client, self.session, self.notifications)
        self.answers = AnswerStore(self.client, self.session, self.notifications, self.questions)
        self.profile = ProfileStore(self.client, self.session, self.notifications)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
