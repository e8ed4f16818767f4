"""Deferred callbacks used by the engines (reveal delays, flip-backs)."""

from __future__ import annotations

from typing import Callable, Protocol


class ScheduledCall(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Runs *callback* once after *delay_ms* on the same thread that drives the engine."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        ...
