"""Ephemeral toast notifications."""

import asyncio
import logging
import uuid
from typing import Optional

from .models import Toast, ToastType

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 4.0


class ToastManager:
    """
    Holds the visible toasts.

    Every toast gets its own timer on the running event loop and disappears
    when that timer fires; closing a toast early cancels only its timer.
    Without a running loop toasts stay until removed explicitly.
    """

    def __init__(self) -> None:
        self._toasts: dict[str, Toast] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    @property
    def toasts(self) -> list[Toast]:
        return list(self._toasts.values())

    def __len__(self) -> int:
        return len(self._toasts)

    def add(
        self,
        message: str,
        type: ToastType = ToastType.SUCCESS,
        duration: float = DEFAULT_DURATION,
    ) -> str:
        """
        Show a toast.

        Args:
            message: Text to display
            type: success, error, warning or info
            duration: Seconds before the toast is dismissed

        Returns:
            The toast ID
        """
        toast_id = uuid.uuid4().hex
        self._toasts[toast_id] = Toast(id=toast_id, message=message, type=type, duration=duration)
        logger.debug(f"Toast {type.value}: {message}")

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return toast_id
        self._timers[toast_id] = loop.call_later(duration, self._expire, toast_id)
        return toast_id

    def _expire(self, toast_id: str) -> None:
        self._timers.pop(toast_id, None)
        self._toasts.pop(toast_id, None)

    def remove(self, toast_id: str) -> None:
        timer = self._timers.pop(toast_id, None)
        if timer is not None:
            timer.cancel()
        self._toasts.pop(toast_id, None)

    def get(self, toast_id: str) -> Optional[Toast]:
        return self._toasts.get(toast_id)

    def latest(self) -> Optional[Toast]:
        if not self._toasts:
            return None
        return next(reversed(self._toasts.values()))

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._toasts.clear()
