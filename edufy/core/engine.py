from __future__ import annotations

import functools
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from edufy.core.items import Choice, Item
from edufy.core.levels import GameDefinition, Level
from edufy.core.rules import EngineConfig, OptionSource, SelectionMode
from edufy.core.scheduling import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    LEVEL_STARTED = "level_started"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    TIME_UP = "time_up"
    LEVEL_COMPLETE = "level_complete"
    GAME_COMPLETE = "game_complete"


@dataclass(frozen=True)
class OutcomeEvent:
    """Signal for the presentation shell; sounds, toasts and the mascot react to these."""

    outcome: Outcome
    game_key: str
    level_index: int
    score: int
    item: Optional[Item] = None
    choice: Optional[Choice] = None


@dataclass
class RoundState:
    """Mutable per-session state; replaced wholesale on every level start."""

    level_index: int = 0
    score: int = 0
    current_target: Optional[Item] = None
    options: Tuple[Union[Item, Choice], ...] = ()
    time_remaining: Optional[int] = None
    is_level_complete: bool = False
    is_game_complete: bool = False
    generation: int = 0
    round_number: int = 0
    mistakes: int = 0


Listener = Callable[[OutcomeEvent], None]


class LevelEngine:
    """Level progression shared by every game: start, reset, advance, countdown.

    Subclasses fill in ``_prepare_level`` to set up the rounds of a level.
    Every entry point runs synchronously on the caller's thread; deferred work
    goes through :meth:`schedule` so it is dropped once the level restarts.
    """

    def __init__(
        self,
        game: GameDefinition,
        *,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._game = game
        self._config = config or game.rules
        self._rng = rng or random.Random()
        self._scheduler = scheduler
        self._listeners: List[Listener] = []
        self._pending: List[ScheduledCall] = []
        self.state = RoundState()

    @property
    def game(self) -> GameDefinition:
        return self._game

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def level_count(self) -> int:
        return self._game.level_count

    @property
    def level(self) -> Level:
        return self._game.level(self.state.level_index)

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def required_score(self) -> int:
        return self.level.required_score

    @property
    def time_remaining(self) -> Optional[int]:
        return self.state.time_remaining

    @property
    def is_level_complete(self) -> bool:
        return self.state.is_level_complete

    @property
    def is_game_complete(self) -> bool:
        return self.state.is_game_complete

    @property
    def is_last_level(self) -> bool:
        return self.state.level_index == self.level_count - 1

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start_level(self, level_index: int) -> None:
        """Begin *level_index* from scratch: score 0, timer re-armed, fresh round."""
        if not 0 <= level_index < self.level_count:
            raise IndexError(f"{self._game.key}: level index {level_index} out of range 0..{self.level_count - 1}")
        self._cancel_pending()
        level = self._game.level(level_index)
        self.state = RoundState(
            level_index=level_index,
            time_remaining=level.time_limit,
            generation=self.state.generation + 1,
        )
        self._prepare_level(level)
        logger.debug("%s: level %d started (generation %d)", self._game.key, level.number, self.state.generation)
        self._emit(Outcome.LEVEL_STARTED)

    def reset_level(self) -> None:
        self.start_level(self.state.level_index)

    def advance_level(self) -> bool:
        """Move to the next level; only allowed once the current one is complete."""
        if not self.state.is_level_complete or self.is_last_level:
            return False
        self.start_level(self.state.level_index + 1)
        return True

    def restart_game(self) -> None:
        self.start_level(0)

    def tick(self) -> Optional[OutcomeEvent]:
        """Advance the countdown by one second; time running out restarts the level."""
        state = self.state
        if state.time_remaining is None or state.is_level_complete:
            return None
        if state.time_remaining > 0:
            state.time_remaining -= 1
        if state.time_remaining > 0:
            return None
        logger.info("%s: time is up on level %d", self._game.key, self.level.number)
        event = self._emit(Outcome.TIME_UP)
        self.reset_level()
        return event

    def guard(self, callback: Callable[..., None]) -> Callable[..., None]:
        """Wrap *callback* so it does nothing once the level has been restarted."""
        generation = self.state.generation

        @functools.wraps(callback)
        def _guarded(*args, **kwargs):
            if self.state.generation != generation:
                logger.debug("%s: dropping stale callback from generation %d", self._game.key, generation)
                return None
            return callback(*args, **kwargs)

        return _guarded

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Optional[ScheduledCall]:
        """Run *callback* after *delay_ms*, unless the level restarts first.

        Without a scheduler the callback runs immediately.
        """
        guarded = self.guard(callback)
        if self._scheduler is None:
            guarded()
            return None

        handle: Optional[ScheduledCall] = None

        def _fire() -> None:
            if handle in self._pending:
                self._pending.remove(handle)
            guarded()

        handle = self._scheduler.call_later(delay_ms, _fire)
        self._pending.append(handle)
        return handle

    def close(self) -> None:
        """Cancel pending callbacks; call when the game screen goes away."""
        self._cancel_pending()

    def _prepare_level(self, level: Level) -> None:
        raise NotImplementedError

    def _cancel_pending(self) -> None:
        pending, self._pending = self._pending, []
        for handle in pending:
            handle.cancel()

    def _record_correct(self, item: Optional[Item], choice: Optional[Choice] = None) -> OutcomeEvent:
        state = self.state
        state.score += 1
        event = self._emit(Outcome.CORRECT, item=item, choice=choice)
        if state.score >= self.level.required_score:
            state.is_level_complete = True
            logger.info("%s: level %d complete", self._game.key, self.level.number)
            self._emit(Outcome.LEVEL_COMPLETE, item=item)
            if self.is_last_level:
                state.is_game_complete = True
                logger.info("%s: all %d levels complete", self._game.key, self.level_count)
                self._emit(Outcome.GAME_COMPLETE, item=item)
        return event

    def _emit(self, outcome: Outcome, item: Optional[Item] = None, choice: Optional[Choice] = None) -> OutcomeEvent:
        event = OutcomeEvent(
            outcome=outcome,
            game_key=self._game.key,
            level_index=self.state.level_index,
            score=self.state.score,
            item=item,
            choice=choice,
        )
        for listener in list(self._listeners):
            listener(event)
        return event


class RoundEngine(LevelEngine):
    """Target/options round engine behind every choice, drag-and-drop and quiz game."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._sequence: Tuple[Item, ...] = ()

    @property
    def current_target(self) -> Optional[Item]:
        return self.state.current_target

    @property
    def options(self) -> Tuple[Union[Item, Choice], ...]:
        return self.state.options

    @property
    def sequence(self) -> Tuple[Item, ...]:
        """Items walked in order by sequential games for the current level."""
        return self._sequence

    @property
    def sequence_position(self) -> int:
        if not self._sequence:
            return 0
        return self.state.round_number % len(self._sequence)

    def select_target(self, level: Level) -> Item:
        if self._config.selection_mode == SelectionMode.SEQUENTIAL and self._sequence:
            return self._sequence[self.sequence_position]
        # with replacement: the same item may come up twice in a row
        return self._rng.choice(level.items)

    def build_options(
        self,
        target: Item,
        level: Level,
        distractor_count: Optional[int] = None,
    ) -> Tuple[Union[Item, Choice], ...]:
        """Target plus up to *distractor_count* other level items, shuffled."""
        if self._config.option_source == OptionSource.CHOICES:
            return tuple(target.choices)
        if distractor_count is None:
            distractor_count = self._config.distractor_count
        pool = [item for item in level.items if item.id != target.id]
        distractors = self._rng.sample(pool, min(distractor_count, len(pool)))
        options = [target, *distractors]
        self._rng.shuffle(options)
        return tuple(options)

    def submit_answer(self, candidate: Union[Item, Choice]) -> Optional[OutcomeEvent]:
        """Score *candidate* against the current target and move on to the next round."""
        target = self.state.current_target
        if self.state.is_level_complete or target is None:
            return None
        if self._config.option_source == OptionSource.CHOICES:
            matched = isinstance(candidate, Choice) and target.accepts(candidate)
        else:
            matched = candidate.id == target.id
        choice = candidate if isinstance(candidate, Choice) else None
        return self._resolve(matched, target, choice)

    def on_dropped(self, dragged_item: Item, target_zone: str) -> Optional[OutcomeEvent]:
        """Drag-and-drop answer: *dragged_item* released over the zone *target_zone*."""
        target = self.state.current_target
        if self.state.is_level_complete or target is None:
            return None
        matched = dragged_item.id == target.id and (
            dragged_item.category is None or dragged_item.category == target_zone
        )
        return self._resolve(matched, target)

    def _prepare_level(self, level: Level) -> None:
        self._sequence = self._level_sequence(level)
        self._next_round()

    def _level_sequence(self, level: Level) -> Tuple[Item, ...]:
        if level.sequence:
            return tuple(level.item(step) for step in level.sequence)
        if level.sequence_length:
            return tuple(self._rng.choice(level.items) for _ in range(level.sequence_length))
        return tuple(level.items)

    def _next_round(self) -> None:
        level = self.level
        target = self.select_target(level)
        self.state.current_target = target
        self.state.options = self.build_options(target, level)

    def _resolve(self, matched: bool, target: Item, choice: Optional[Choice] = None) -> OutcomeEvent:
        if matched:
            event = self._record_correct(target, choice)
        else:
            self.state.mistakes += 1
            event = self._emit(Outcome.INCORRECT, item=target, choice=choice)
            if self._config.reset_on_mistake:
                self.reset_level()
                return event
        if not self.state.is_level_complete:
            self.state.round_number += 1
            self._next_round()
        return event
