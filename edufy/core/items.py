from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Choice:
    """One answer of a scenario quiz."""

    id: str
    text: str
    correct: bool = False


@dataclass(frozen=True)
class Item:
    """A single matchable unit of content: a color, emotion, word, shape, step..."""

    id: str
    name: str
    glyph: str = ""
    text: str = ""
    category: Optional[str] = None
    choices: Tuple[Choice, ...] = ()
    extras: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def correct_choices(self) -> Tuple[Choice, ...]:
        return tuple(c for c in self.choices if c.correct)

    def accepts(self, choice: Choice) -> bool:
        """Return True if *choice* is one of this item's correct answers."""
        return any(c.id == choice.id for c in self.correct_choices())
