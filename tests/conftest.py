"""Shared fixtures: a hand-driven scheduler and small game tables."""

from __future__ import annotations

import random
from typing import Callable, List, Optional

import pytest

from edufy.core.items import Item
from edufy.core.levels import GameDefinition, Level
from edufy.core.rules import EngineConfig, GameKind


class ManualCall:
    def __init__(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Records scheduled callbacks; tests fire them with :meth:`run_pending`."""

    def __init__(self) -> None:
        self.calls: List[ManualCall] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualCall:
        call = ManualCall(delay_ms, callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> List[ManualCall]:
        return [c for c in self.calls if not c.cancelled and not c.fired]

    def run_pending(self) -> int:
        ran = 0
        for call in self.pending:
            call.fired = True
            call.callback()
            ran += 1
        return ran

    def fire_all(self) -> None:
        """Fire every call, cancelled or not, like a timer that raced its cancel."""
        for call in self.calls:
            call.fired = True
            call.callback()


def make_items(count: int, prefix: str = "i") -> tuple:
    return tuple(Item(id=f"{prefix}{n}", name=f"Item {n}", glyph=str(n)) for n in range(1, count + 1))


def make_game(
    levels: List[Level],
    *,
    rules: Optional[EngineConfig] = None,
    kind: GameKind = GameKind.CHOICE,
    key: str = "demo",
) -> GameDefinition:
    items = {}
    for level in levels:
        for item in level.items:
            items.setdefault(item.id, item)
    return GameDefinition(
        key=key,
        title="Demo",
        levels=tuple(levels),
        items=tuple(items.values()),
        kind=kind,
        rules=rules or EngineConfig(),
    )


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()
