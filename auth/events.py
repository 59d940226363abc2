from __future__ import annotations

from typing import Callable

from designhub.constants import LOGGER

SESSION_EXPIRED_EVENT = "designhub:auth:session-expired"

Listener = Callable[[], None]


class SessionExpiredNotifier:
    """Named broadcast fired when the stored session can no longer be used.

    Listeners take no arguments. A listener that raises is logged and the
    remaining listeners still run.
    """

    def __init__(self, name: str = SESSION_EXPIRED_EVENT) -> None:
        self.name = name
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self) -> None:
        LOGGER.info("Broadcasting %s to %s listener(s)", self.name, len(self._listeners))
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                LOGGER.exception("Listener for %s failed", self.name)

    def __len__(self) -> int:
        return len(self._listeners)


session_expired = SessionExpiredNotifier()
