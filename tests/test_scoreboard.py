"""Tests for edufy.core.scoreboard – session points, streaks and finished levels."""

from __future__ import annotations

import random

import pytest

from conftest import make_game, make_items

from edufy.core.engine import Outcome, OutcomeEvent, RoundEngine
from edufy.core.levels import Level
from edufy.core.scoreboard import GameProgress, SessionScoreboard


def _event(outcome: Outcome, level_index: int = 0, game_key: str = "demo") -> OutcomeEvent:
    return OutcomeEvent(outcome=outcome, game_key=game_key, level_index=level_index, score=0)


@pytest.fixture()
def board() -> SessionScoreboard:
    return SessionScoreboard()


# ===========================================================================
# Points and streaks
# ===========================================================================

class TestPoints:
    def test_initial(self, board: SessionScoreboard):
        assert board.get_gamification() == (0, 0, 0)
        assert board.combo_multiplier == 1.0

    def test_first_correct(self, board: SessionScoreboard):
        board.record(_event(Outcome.CORRECT))
        # 10 base + 2 per streak step
        assert board.total_points == 12
        assert board.current_streak == 1
        assert board.best_streak == 1

    def test_streak_bonus_grows(self, board: SessionScoreboard):
        for _ in range(3):
            board.record(_event(Outcome.CORRECT))
        assert board.total_points == 12 + 14 + 16

    def test_combo_after_five(self, board: SessionScoreboard):
        for _ in range(5):
            board.record(_event(Outcome.CORRECT))
        assert board.total_points == 80
        assert board.combo_multiplier == 1.5
        board.record(_event(Outcome.CORRECT))
        assert board.total_points == 80 + int(22 * 1.5)

    def test_combo_after_ten(self, board: SessionScoreboard):
        for _ in range(10):
            board.record(_event(Outcome.CORRECT))
        assert board.combo_multiplier == 2.0

    @pytest.mark.parametrize("outcome", [Outcome.INCORRECT, Outcome.TIME_UP])
    def test_mistake_resets_streak(self, board: SessionScoreboard, outcome: Outcome):
        for _ in range(6):
            board.record(_event(Outcome.CORRECT))
        points = board.total_points
        board.record(_event(outcome))
        assert board.current_streak == 0
        assert board.best_streak == 6
        assert board.combo_multiplier == 1.0
        assert board.total_points == points

    def test_level_started_changes_nothing(self, board: SessionScoreboard):
        board.record(_event(Outcome.CORRECT))
        board.record(_event(Outcome.LEVEL_STARTED))
        assert board.get_gamification() == (12, 1, 1)


# ===========================================================================
# Per-game progress
# ===========================================================================

class TestGameProgress:
    def test_unknown_game_is_empty(self, board: SessionScoreboard):
        assert board.get_game_progress("nope") == GameProgress()
        assert board.completed_levels("nope") == 0

    def test_level_complete_recorded_once(self, board: SessionScoreboard):
        board.record(_event(Outcome.LEVEL_COMPLETE, level_index=2))
        board.record(_event(Outcome.LEVEL_COMPLETE, level_index=2))
        board.record(_event(Outcome.LEVEL_COMPLETE, level_index=0))
        assert board.get_game_progress("demo").completed_levels == {0, 2}
        assert board.completed_levels("demo") == 2

    def test_games_tracked_separately(self, board: SessionScoreboard):
        board.record(_event(Outcome.LEVEL_COMPLETE, game_key="colors"))
        assert board.completed_levels("colors") == 1
        assert board.completed_levels("shapes") == 0

    def test_game_complete_flag(self, board: SessionScoreboard):
        board.record(_event(Outcome.GAME_COMPLETE))
        assert board.get_game_progress("demo").game_complete is True

    def test_reset(self, board: SessionScoreboard):
        board.record(_event(Outcome.CORRECT))
        board.record(_event(Outcome.LEVEL_COMPLETE))
        board.reset()
        assert board.get_gamification() == (0, 0, 0)
        assert board.completed_levels("demo") == 0


# ===========================================================================
# Listening to an engine
# ===========================================================================

class TestAttach:
    def _engine(self) -> RoundEngine:
        game = make_game([
            Level(number=1, items=make_items(2), required_score=1),
            Level(number=2, items=make_items(2), required_score=1),
        ])
        return RoundEngine(game, rng=random.Random(5))

    def test_attach_records_play(self, board: SessionScoreboard):
        engine = self._engine()
        board.attach(engine)
        engine.start_level(0)
        engine.submit_answer(engine.current_target)
        engine.advance_level()
        engine.submit_answer(engine.current_target)
        assert board.total_points == 12 + 14
        assert board.get_game_progress("demo").completed_levels == {0, 1}
        assert board.get_game_progress("demo").game_complete is True

    def test_detach_stops_recording(self, board: SessionScoreboard):
        engine = self._engine()
        board.attach(engine)
        engine.start_level(0)
        board.detach(engine)
        engine.submit_answer(engine.current_target)
        assert board.total_points == 0
