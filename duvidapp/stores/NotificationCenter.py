"""Toasts, the modal slot and the global loading flag."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Literal, Optional
from uuid import uuid4

from duvidapp.config.settings import settings
from duvidapp.stores.base import BaseStore

logger = logging.getLogger(__name__)

Severity = Literal["success", "error", "info"]


@dataclass(frozen=True, slots=True)
class Toast:
    id: str
    message: str
    severity: Severity
    timestamp: float


class NotificationCenter(BaseStore):
    def __init__(self, duration: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self.duration = duration if duration is not None else settings.toast_duration
        self._clock = clock
        self._toasts: List[Toast] = []
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._modal_content: Any = None
        self._modal_open = False
        self._loading = False

    # Toasts

    def show_toast(self, message: str, severity: Severity = "info") -> Toast:
        toast = Toast(
            id=f"toast_{uuid4().hex[:12]}",
            message=message,
            severity=severity,
            timestamp=self._clock(),
        )
        self._toasts.append(toast)
        logger.debug("toast %s [%s] %s", toast.id, severity, message)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._timers[toast.id] = loop.call_later(self.duration, self.dismiss, toast.id)

        self._emit()
        return toast

    @property
    def toasts(self) -> List[Toast]:
        """Live toasts in insertion order; expired ones are dropped on read"""
        now = self._clock()
        expired = [t.id for t in self._toasts if now - t.timestamp >= self.duration]
        for toast_id in expired:
            self.dismiss(toast_id)
        return list(self._toasts)

    def dismiss(self, toast_id: str) -> bool:
        timer = self._timers.pop(toast_id, None)
        if timer is not None:
            timer.cancel()
        remaining = [t for t in self._toasts if t.id != toast_id]
        if len(remaining) == len(self._toasts):
            return False
        self._toasts = remaining
        self._emit()
        return True

    def clear_toasts(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._toasts = []
        self._emit()

    # Modal

    @property
    def is_modal_open(self) -> bool:
        return self._modal_open

    @property
    def modal_content(self) -> Any:
        return self._modal_content

    def open_modal(self, content: Any) -> None:
        # One slot, the latest content wins
        self._modal_content = content
        self._modal_open = True
        self._emit()

    def close_modal(self) -> None:
        self._modal_content = None
        self._modal_open = False
        self._emit()

    # Loading overlay

    @property
    def is_loading(self) -> bool:
        return self._loading

    def set_loading(self, loading: bool) -> None:
        self._loading = loading
        self._emit()
