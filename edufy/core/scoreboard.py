from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Set, Tuple

from edufy.core.engine import LevelEngine, Outcome, OutcomeEvent

logger = logging.getLogger(__name__)


@dataclass
class GameProgress:
    completed_levels: Set[int] = field(default_factory=set)
    best_level_streak: int = 0
    game_complete: bool = False


class SessionScoreboard:
    """Points, streaks and finished levels for the current run of the app.

    Nothing is written to disk; closing the app starts everyone fresh.
    """

    def __init__(self) -> None:
        self._progress: Dict[str, GameProgress] = {}
        self._total_points = 0
        self._current_streak = 0
        self._best_streak = 0
        self._combo_multiplier = 1.0
        self._consecutive_correct = 0

    @property
    def total_points(self) -> int:
        return self._total_points

    @property
    def current_streak(self) -> int:
        return self._current_streak

    @property
    def best_streak(self) -> int:
        return self._best_streak

    @property
    def combo_multiplier(self) -> float:
        return self._combo_multiplier

    def get_gamification(self) -> Tuple[int, int, int]:
        """Return (total_points, current_streak, best_streak)."""
        return (self._total_points, self._current_streak, self._best_streak)

    def get_game_progress(self, game_key: str) -> GameProgress:
        return self._progress.get(game_key, GameProgress())

    def completed_levels(self, game_key: str) -> int:
        return len(self.get_game_progress(game_key).completed_levels)

    def attach(self, engine: LevelEngine) -> None:
        engine.subscribe(self.record)

    def detach(self, engine: LevelEngine) -> None:
        engine.unsubscribe(self.record)

    def record(self, event: OutcomeEvent) -> None:
        if event.outcome == Outcome.CORRECT:
            self._current_streak += 1
            self._best_streak = max(self._best_streak, self._current_streak)
            base_points = 10
            streak_bonus = self._current_streak * 2
            self._total_points += int((base_points + streak_bonus) * self._combo_multiplier)
            self._consecutive_correct += 1
        elif event.outcome in (Outcome.INCORRECT, Outcome.TIME_UP):
            self._current_streak = 0
            self._consecutive_correct = 0
        elif event.outcome == Outcome.LEVEL_COMPLETE:
            progress = self._progress.setdefault(event.game_key, GameProgress())
            progress.completed_levels.add(event.level_index)
            progress.best_level_streak = max(progress.best_level_streak, self._current_streak)
        elif event.outcome == Outcome.GAME_COMPLETE:
            self._progress.setdefault(event.game_key, GameProgress()).game_complete = True
            logger.info("Game %s finished this session", event.game_key)

        if self._consecutive_correct >= 10:
            self._combo_multiplier = 2.0
        elif self._consecutive_correct >= 5:
            self._combo_multiplier = 1.5
        else:
            self._combo_multiplier = 1.0

    def reset(self) -> None:
        self._progress = {}
        self._total_points = 0
        self._current_streak = 0
        self._best_streak = 0
        self._combo_multiplier = 1.0
        self._consecutive_correct = 0
