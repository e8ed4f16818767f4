"""Per-game policy knobs shared by the level tables and the engines."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SelectionMode(str, Enum):
    RANDOM = "random"
    SEQUENTIAL = "sequential"


class OptionSource(str, Enum):
    # distractors sampled from the level's other items
    ITEMS = "items"
    # the target's own scenario answers
    CHOICES = "choices"


class GameKind(str, Enum):
    CHOICE = "choice"
    SORT = "sort"
    MEMORY = "memory"


@dataclass(frozen=True)
class EngineConfig:
    """How a game plays: what happens on a mistake and how rounds are drawn."""

    reset_on_mistake: bool = False
    selection_mode: SelectionMode = SelectionMode.RANDOM
    distractor_count: int = 3
    option_source: OptionSource = OptionSource.ITEMS
    reveal_delay_ms: int = 1000
