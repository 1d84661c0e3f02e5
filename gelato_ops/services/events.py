"""In-process change notification used to invalidate views after mutations."""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from threading import Lock

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


class ChangeNotifier:
    """Fan-out of "channel changed" signals to subscribed refresh callbacks.

    Services call :meth:`notify` after a committed mutation; they never
    re-query lists themselves.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._lock = Lock()

    def subscribe(self, channel: str, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners[channel].append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners[channel]:
                    self._listeners[channel].remove(listener)

        return unsubscribe

    def notify(self, channel: str) -> None:
        with self._lock:
            listeners = list(self._listeners.get(channel, ()))
        for listener in listeners:
            try:
                listener(channel)
            except Exception:  # listener failures must not undo a committed mutation
                logger.exception("refresh listener failed", extra={"channel": channel})

    def reset(self) -> None:
        with self._lock:
            self._listeners.clear()


change_notifier = ChangeNotifier()


__all__ = ["ChangeNotifier", "Listener", "change_notifier"]
