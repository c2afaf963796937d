import logging
from typing import Callable, List

from duvidapp.exceptions import DuvidAppError

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class BaseStore:
    """State holder that tells subscribers when its state changed"""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener()


class NotifyingStore(BaseStore):
    """Store whose network failures end up as a single error toast"""

    def __init__(self, notifications):
        super().__init__()
        self._notifications = notifications

    def _fail(self, action: str, error: DuvidAppError) -> bool:
        logger.warning("%s failed: %s", action, error)
        self._notifications.show_toast(error.message, "error")
        return False

    def _succeed(self, message: str) -> bool:
        self._notifications.show_toast(message, "success")
        return True
