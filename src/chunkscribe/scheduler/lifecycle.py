"""Host lifecycle signals delivered to the scheduler."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable

from chunkscribe.utils.progress import log_warning


class LifecycleEvent(str, Enum):
    BACKGROUND = "background"
    FOREGROUND = "foreground"
    TERMINATE = "terminate"


class LifecycleSignals:
    """Injected event source: callbacks per lifecycle event.

    Callbacks run synchronously on the emitting thread in registration
    order. A failing callback is logged and does not stop the others.
    """

    def __init__(self):
        self._callbacks: dict[LifecycleEvent, list[Callable[[], None]]] = {
            event: [] for event in LifecycleEvent
        }
        self._lock = threading.Lock()

    def connect(self, event: LifecycleEvent | str, callback: Callable[[], None]) -> None:
        with self._lock:
            self._callbacks[LifecycleEvent(event)].append(callback)

    def disconnect(self, event: LifecycleEvent | str, callback: Callable[[], None]) -> None:
        with self._lock:
            callbacks = self._callbacks[LifecycleEvent(event)]
            if callback in callbacks:
                callbacks.remove(callback)

    def emit(self, event: LifecycleEvent | str) -> None:
        event = LifecycleEvent(event)
        with self._lock:
            callbacks = list(self._callbacks[event])
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                log_warning(f"{event.value} handler failed: {e}")
