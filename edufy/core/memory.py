from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from edufy.core.engine import LevelEngine, Outcome, OutcomeEvent
from edufy.core.items import Item
from edufy.core.levels import Level

logger = logging.getLogger(__name__)


@dataclass
class Card:
    """One face of the memory grid; each level item is dealt twice."""

    index: int
    item: Item
    face_up: bool = False
    matched: bool = False


class MemoryEngine(LevelEngine):
    """Memory match: turn two cards, keep them if they show the same picture.

    A mismatched pair stays visible for ``reveal_delay_ms`` and is then turned
    back through :meth:`schedule`, so restarting the level first cancels it.
    Score counts pairs found.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._cards: List[Card] = []
        self._face_up: List[Card] = []
        self._moves = 0

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def moves(self) -> int:
        return self._moves

    @property
    def pairs_found(self) -> int:
        return self.state.score

    @property
    def is_revealing(self) -> bool:
        """True while a mismatched pair waits to be turned back."""
        return len(self._face_up) >= 2

    def flip(self, card_index: int) -> Optional[OutcomeEvent]:
        if self.state.is_level_complete or not 0 <= card_index < len(self._cards):
            return None
        card = self._cards[card_index]
        if card.face_up or card.matched or len(self._face_up) >= 2:
            return None

        card.face_up = True
        self._face_up.append(card)
        if len(self._face_up) < 2:
            return None

        self._moves += 1
        first, second = self._face_up
        if first.item.id == second.item.id:
            first.matched = second.matched = True
            self._face_up = []
            return self._record_correct(second.item)

        self.state.mistakes += 1
        event = self._emit(Outcome.INCORRECT, item=second.item)
        self.schedule(self._config.reveal_delay_ms, self._turn_back)
        return event

    def _turn_back(self) -> None:
        for card in self._face_up:
            card.face_up = False
        self._face_up = []

    def _prepare_level(self, level: Level) -> None:
        faces = [item for item in level.items for _ in range(2)]
        self._rng.shuffle(faces)
        self._cards = [Card(index=i, item=item) for i, item in enumerate(faces)]
        self._face_up = []
        self._moves = 0
        logger.debug("%s: dealt %d cards", self._game.key, len(self._cards))
