"""Tests for edufy.core.memory – memory match with delayed flip-back."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from conftest import ManualScheduler, make_game, make_items

from edufy.core.engine import Outcome
from edufy.core.levels import Level
from edufy.core.memory import MemoryEngine
from edufy.core.rules import EngineConfig, GameKind


def _pair(engine: MemoryEngine, item_id: str) -> list[int]:
    return [c.index for c in engine.cards if c.item.id == item_id]


def _mismatch(engine: MemoryEngine) -> tuple[int, int]:
    first = engine.cards[0]
    second = next(c for c in engine.cards if c.item.id != first.item.id)
    return first.index, second.index


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def engine(scheduler: ManualScheduler) -> MemoryEngine:
    levels = [
        Level(number=1, items=make_items(3), required_score=3),
        Level(number=2, items=make_items(4), required_score=4, time_limit=60),
    ]
    game = make_game(levels, kind=GameKind.MEMORY, rules=EngineConfig(reveal_delay_ms=1000))
    engine = MemoryEngine(game, rng=random.Random(99), scheduler=scheduler)
    engine.start_level(0)
    return engine


# ===========================================================================
# Dealing
# ===========================================================================

class TestDeal:
    def test_every_item_dealt_twice(self, engine: MemoryEngine):
        counts = Counter(c.item.id for c in engine.cards)
        assert len(engine.cards) == 6
        assert set(counts.values()) == {2}

    def test_cards_start_face_down(self, engine: MemoryEngine):
        assert not any(c.face_up or c.matched for c in engine.cards)
        assert engine.moves == 0
        assert engine.pairs_found == 0

    def test_new_level_redeals(self, engine: MemoryEngine):
        for item in engine.level.items:
            a, b = _pair(engine, item.id)
            engine.flip(a)
            engine.flip(b)
        assert engine.advance_level() is True
        assert len(engine.cards) == 8
        assert engine.moves == 0
        assert engine.time_remaining == 60


# ===========================================================================
# Flipping
# ===========================================================================

class TestFlip:
    def test_first_flip_returns_nothing(self, engine: MemoryEngine):
        assert engine.flip(0) is None
        assert engine.cards[0].face_up is True
        assert engine.moves == 0

    def test_matching_pair(self, engine: MemoryEngine):
        a, b = _pair(engine, "i1")
        engine.flip(a)
        event = engine.flip(b)
        assert event.outcome == Outcome.CORRECT
        assert engine.cards[a].matched and engine.cards[b].matched
        assert engine.pairs_found == 1
        assert engine.moves == 1
        assert engine.is_revealing is False

    def test_mismatch_waits_then_turns_back(self, engine: MemoryEngine, scheduler: ManualScheduler):
        a, b = _mismatch(engine)
        engine.flip(a)
        event = engine.flip(b)
        assert event.outcome == Outcome.INCORRECT
        assert engine.is_revealing is True
        assert engine.cards[a].face_up and engine.cards[b].face_up
        assert scheduler.pending[0].delay_ms == 1000

        scheduler.run_pending()
        assert engine.is_revealing is False
        assert not engine.cards[a].face_up
        assert not engine.cards[b].face_up
        assert engine.state.mistakes == 1

    def test_third_flip_ignored_while_revealing(self, engine: MemoryEngine):
        a, b = _mismatch(engine)
        engine.flip(a)
        engine.flip(b)
        third = next(c.index for c in engine.cards if c.index not in (a, b))
        assert engine.flip(third) is None
        assert engine.cards[third].face_up is False

    def test_same_card_twice_ignored(self, engine: MemoryEngine):
        engine.flip(0)
        assert engine.flip(0) is None
        assert engine.moves == 0

    def test_matched_card_ignored(self, engine: MemoryEngine):
        a, b = _pair(engine, "i2")
        engine.flip(a)
        engine.flip(b)
        assert engine.flip(a) is None

    @pytest.mark.parametrize("index", [-1, 6, 100])
    def test_out_of_range_ignored(self, engine: MemoryEngine, index: int):
        assert engine.flip(index) is None

    def test_all_pairs_complete_level(self, engine: MemoryEngine):
        received = []
        engine.subscribe(received.append)
        for item in engine.level.items:
            a, b = _pair(engine, item.id)
            engine.flip(a)
            engine.flip(b)
        assert engine.is_level_complete is True
        assert engine.is_game_complete is False
        assert Outcome.LEVEL_COMPLETE in [e.outcome for e in received]
        assert engine.flip(0) is None


# ===========================================================================
# Restarts during a reveal
# ===========================================================================

class TestRevealAcrossRestart:
    def test_reset_cancels_flip_back(self, engine: MemoryEngine, scheduler: ManualScheduler):
        a, b = _mismatch(engine)
        engine.flip(a)
        engine.flip(b)
        engine.reset_level()
        assert scheduler.calls[0].cancelled is True
        assert engine.is_revealing is False

    def test_stale_flip_back_does_not_touch_new_board(self, engine: MemoryEngine, scheduler: ManualScheduler):
        a, b = _mismatch(engine)
        engine.flip(a)
        engine.flip(b)
        engine.reset_level()
        engine.flip(0)
        scheduler.fire_all()
        assert engine.cards[0].face_up is True

    def test_without_scheduler_turns_back_at_once(self):
        game = make_game([Level(number=1, items=make_items(2), required_score=2)], kind=GameKind.MEMORY)
        engine = MemoryEngine(game, rng=random.Random(3))
        engine.start_level(0)
        a, b = _mismatch(engine)
        engine.flip(a)
        assert engine.flip(b).outcome == Outcome.INCORRECT
        assert engine.is_revealing is False
        assert not any(c.face_up for c in engine.cards)
