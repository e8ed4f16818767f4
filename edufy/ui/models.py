"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Union

from edufy.core.engine import Outcome
from edufy.core.items import Choice, Item
from edufy.core.levels import GameDefinition, Level


@dataclass
class GameCardState:
    """Home screen card for one game."""

    game: GameDefinition
    completed_levels: int
    game_complete: bool = False


@dataclass
class LevelState:
    """UI state for a single level: unlock status, completion and selection."""

    level: Level
    unlocked: bool
    completed: bool
    is_current: bool = False


@dataclass(frozen=True)
class FeedbackCue:
    """What the mascot, toast and speakers do in reaction to an outcome."""

    expression: str
    message: str
    corner: str
    toast: str = ""
    toast_kind: str = "info"
    sound: str = ""


_CUES = {
    Outcome.CORRECT: FeedbackCue("😄", "Great job! Keep going!", "bottom-left", "Correct!", "success", "success"),
    Outcome.INCORRECT: FeedbackCue("😟", "Try again!", "top-right", "Try Again!", "error", "failure"),
    Outcome.TIME_UP: FeedbackCue("😟", "Time's up! Try again!", "top-right", "Time's Up!", "error", "failure"),
    Outcome.LEVEL_COMPLETE: FeedbackCue("🥳", "You finished the level!", "bottom-left", "Level Complete! 🎉", "celebrate", "achievement"),
    Outcome.GAME_COMPLETE: FeedbackCue(
        "🏆", "You've completed all levels!", "bottom-left",
        "🎉 Congratulations! You've completed all levels! 🎉", "celebrate", "game-end",
    ),
}


def feedback_for(outcome: Outcome, level_description: str = "") -> FeedbackCue:
    """Map an engine outcome to its cosmetic feedback; a level start shows the level goal."""
    if outcome == Outcome.LEVEL_STARTED:
        return FeedbackCue("😊", level_description or "Let's play!", "bottom-right", sound="game-start")
    return _CUES[outcome]


def field_text(entry: Union[Item, Choice], field_name: str) -> str:
    """Text of one display field of an item or quiz answer; lists are joined with spaces."""
    if isinstance(entry, Choice):
        return entry.text if field_name in ("text", "name") else ""
    if field_name in ("id", "name", "glyph", "text"):
        value = getattr(entry, field_name)
    elif field_name == "category":
        value = entry.category or ""
    else:
        value = entry.extras.get(field_name, "")
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value) if value is not None else ""


def display_text(entry: Union[Item, Choice], fields: Iterable[str], separator: str = "\n") -> str:
    parts = [field_text(entry, name) for name in fields]
    return separator.join(p for p in parts if p)


def build_level_states(game: GameDefinition, completed: Iterable[int], current_index: int, unlock_all: bool = False) -> list[LevelState]:
    """Unlock each level once the one before it was finished this session."""
    done = set(completed)
    states: list[LevelState] = []
    previous_completed = True
    for idx, level in enumerate(game.levels):
        unlocked = bool(unlock_all or previous_completed)
        states.append(LevelState(level=level, unlocked=unlocked, completed=idx in done, is_current=idx == current_index))
        previous_completed = idx in done
    return states


def _as_lines(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and str(v)]
    return [str(value)]


def answer_notes(outcome: Outcome, item: Optional[Item]) -> str:
    """Text for the panel under a quiz after an answer, right or wrong.

    A wrong answer leads with the correct choices so the child sees what to pick.
    """
    if item is None or outcome not in (Outcome.CORRECT, Outcome.INCORRECT):
        return ""
    lines: list[str] = []
    if outcome == Outcome.INCORRECT:
        lines.extend(f"✅ {choice.text}" for choice in item.correct_choices())
    lines.extend(_as_lines(item.extras.get("explanation")))
    lines.extend(f"💬 {question}" for question in _as_lines(item.extras.get("follow_up")))
    lines.extend(f"💡 {tip}" for tip in _as_lines(item.extras.get("tips")))
    return "\n".join(lines)


def open_options(options: Sequence[Union[Item, Choice]], sequence: Sequence[Item], position: int) -> list:
    """Options of a sequential sort minus the steps already placed; the current step always stays."""
    placed = {step.id for step in sequence[:position]}
    current = sequence[position].id if 0 <= position < len(sequence) else None
    return [entry for entry in options if entry.id not in placed or entry.id == current]
