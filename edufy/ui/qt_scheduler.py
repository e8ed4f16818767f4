"""Scheduler backed by single-shot QTimers on the GUI thread."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer


class QtScheduledCall:
    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtScheduler:
    """Runs engine callbacks from the Qt event loop so they never race user input.

    *on_fired* runs after each callback; screens use it to redraw.
    """

    def __init__(self, parent: Optional[QObject] = None, on_fired: Optional[Callable[[], None]] = None) -> None:
        self._parent = parent
        self._on_fired = on_fired

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtScheduledCall:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        handle = QtScheduledCall(timer)

        def _fire() -> None:
            handle.cancel()
            callback()
            if self._on_fired is not None:
                self._on_fired()

        timer.timeout.connect(_fire)
        timer.start(max(0, int(delay_ms)))
        return handle
