from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from edufy.core.items import Choice, Item
from edufy.core.rules import EngineConfig, GameKind, OptionSource, SelectionMode

logger = logging.getLogger(__name__)

_ITEM_FIELDS = {"id", "name", "glyph", "text", "category", "choices"}


class ConfigurationError(ValueError):
    """A content or level table is malformed."""


@dataclass(frozen=True)
class Level:
    number: int
    items: Tuple[Item, ...]
    required_score: int
    description: str = ""
    time_limit: Optional[int] = None
    sequence: Tuple[str, ...] = ()
    sequence_length: Optional[int] = None
    difficulty: str = "easy"

    def item(self, item_id: str) -> Item:
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)


@dataclass(frozen=True)
class GameDefinition:
    key: str
    title: str
    levels: Tuple[Level, ...]
    items: Tuple[Item, ...] = ()
    description: str = ""
    icon: str = ""
    color: str = "#00838f"
    kind: GameKind = GameKind.CHOICE
    prompt: str = ""
    rules: EngineConfig = EngineConfig()
    prompt_fields: Tuple[str, ...] = ("glyph",)
    option_fields: Tuple[str, ...] = ("glyph", "name")

    @property
    def level_count(self) -> int:
        return len(self.levels)

    def level(self, index: int) -> Level:
        return self.levels[index]


class GameRepository:
    """Loads every game table from ``data/games/NN_key.yaml`` and validates it up front."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        if base_dir is None:
            env_dir = os.environ.get("EDUFY_GAMES_DIR")
            base_dir = Path(env_dir) if env_dir else Path(__file__).resolve().parent.parent / "data" / "games"
        self._base_dir = Path(base_dir)
        self._games = self._load_games()

    def all(self) -> List[GameDefinition]:
        return list(self._games.values())

    def keys(self) -> List[str]:
        return list(self._games.keys())

    def get(self, key: str) -> GameDefinition:
        return self._games[key]

    def _load_games(self) -> Dict[str, GameDefinition]:
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Games directory not found: {self._base_dir}")

        def _sort_key(p: Path) -> tuple[int, str]:
            m = re.match(r"^(\d+)_(.+)$", p.stem)
            if m:
                return (int(m.group(1)), m.group(2))
            return (10**9, p.stem)

        games: Dict[str, GameDefinition] = {}
        for game_path in sorted(self._base_dir.glob("*.yaml"), key=_sort_key):
            m = re.match(r"^\d+_(.+)$", game_path.stem)
            key = m.group(1) if m else game_path.stem
            if key in games:
                raise ConfigurationError(f"{game_path.name}: duplicate game key '{key}'")
            raw = yaml.safe_load(game_path.read_text(encoding="utf-8"))
            games[key] = parse_game(key, raw, source=game_path.name)
            logger.debug("Loaded game %s (%d levels)", key, games[key].level_count)

        if not games:
            raise ConfigurationError(f"No game files (*.yaml) found in {self._base_dir}")
        logger.info("Loaded %d games from %s", len(games), self._base_dir)
        return games


def parse_game(key: str, raw: Any, source: str = "<memory>") -> GameDefinition:
    """Build a validated GameDefinition from a decoded YAML mapping."""
    if not raw or not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: expected YAML mapping with 'title', 'items' and 'levels'")
    title = raw.get("title")
    if not title or not isinstance(title, str):
        raise ConfigurationError(f"{source}: missing or invalid 'title'")

    kind = _enum(GameKind, raw.get("kind", GameKind.CHOICE.value), "kind", source)
    rules = _parse_rules(raw.get("rules") or {}, source)
    items = _parse_items(raw.get("items"), source)
    by_id = {item.id: item for item in items}

    raw_levels = raw.get("levels")
    if not isinstance(raw_levels, list) or not raw_levels:
        raise ConfigurationError(f"{source}: 'levels' must be a non-empty list")
    levels = tuple(_parse_level(entry, idx, items, by_id, source) for idx, entry in enumerate(raw_levels))

    display = raw.get("display") or {}
    if not isinstance(display, dict):
        raise ConfigurationError(f"{source}: 'display' must be a mapping")

    game = GameDefinition(
        key=key,
        title=title.strip(),
        levels=levels,
        items=items,
        description=str(raw.get("description", "")).strip(),
        icon=str(raw.get("icon", "")),
        color=str(raw.get("color", "#00838f")),
        kind=kind,
        prompt=str(raw.get("prompt", "")).strip(),
        rules=rules,
        prompt_fields=_parse_fields(display.get("prompt"), ("glyph",), source),
        option_fields=_parse_fields(display.get("option"), ("glyph", "name"), source),
    )
    validate_game(game, source)
    return game


def validate_game(game: GameDefinition, source: str = "<memory>") -> None:
    """Fail fast on tables that would break an engine invariant during play."""
    rules = game.rules
    if rules.distractor_count < 0:
        raise ConfigurationError(f"{source}: 'distractors' must be >= 0")
    if rules.reveal_delay_ms < 0:
        raise ConfigurationError(f"{source}: 'reveal_delay_ms' must be >= 0")

    for idx, level in enumerate(game.levels):
        where = f"{source}: level {level.number}"
        if level.number != idx + 1:
            raise ConfigurationError(f"{source}: level numbers must be contiguous from 1 (found {level.number} at position {idx + 1})")
        if not level.items:
            raise ConfigurationError(f"{where} has no items")
        ids = [item.id for item in level.items]
        if len(set(ids)) != len(ids):
            raise ConfigurationError(f"{where} lists an item more than once")
        if not _positive_int(level.required_score):
            raise ConfigurationError(f"{where}: 'required_score' must be a positive integer")
        if level.time_limit is not None and not _positive_int(level.time_limit):
            raise ConfigurationError(f"{where}: 'time_limit' must be a positive integer")
        if level.sequence_length is not None and not _positive_int(level.sequence_length):
            raise ConfigurationError(f"{where}: 'sequence_length' must be a positive integer")
        for step in level.sequence:
            if step not in ids:
                raise ConfigurationError(f"{where}: sequence step '{step}' is not one of the level's items")

        if game.kind == GameKind.CHOICE and rules.option_source == OptionSource.ITEMS:
            if rules.distractor_count > 0 and len(level.items) < 2:
                raise ConfigurationError(f"{where} needs at least 2 items to draw distractors from")
        if rules.option_source == OptionSource.CHOICES:
            for item in level.items:
                if not item.choices or not item.correct_choices():
                    raise ConfigurationError(f"{where}: item '{item.id}' needs choices with a correct answer")
        if game.kind == GameKind.MEMORY and level.required_score > len(level.items):
            raise ConfigurationError(f"{where}: 'required_score' exceeds the {len(level.items)} pairs on the board")
        if game.kind == GameKind.SORT:
            # either every item names its box or the level uses one shared drop zone
            categorized = {item.category is not None for item in level.items}
            if len(categorized) > 1:
                raise ConfigurationError(f"{where}: mixes items with and without a 'category'")


def _positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _enum(enum_cls, value: Any, name: str, source: str):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ConfigurationError(f"{source}: invalid '{name}' {value!r} (expected one of: {allowed})") from None


def _parse_fields(raw: Any, default: Tuple[str, ...], source: str) -> Tuple[str, ...]:
    if raw is None:
        return default
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not raw:
        raise ConfigurationError(f"{source}: display fields must be a non-empty list")
    return tuple(str(name).strip() for name in raw)


def _parse_rules(raw: Any, source: str) -> EngineConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: 'rules' must be a mapping")
    defaults = EngineConfig()
    distractors = raw.get("distractors", defaults.distractor_count)
    reveal = raw.get("reveal_delay_ms", defaults.reveal_delay_ms)
    if not isinstance(distractors, int) or isinstance(distractors, bool):
        raise ConfigurationError(f"{source}: 'distractors' must be an integer")
    if not isinstance(reveal, int) or isinstance(reveal, bool):
        raise ConfigurationError(f"{source}: 'reveal_delay_ms' must be an integer")
    return EngineConfig(
        reset_on_mistake=bool(raw.get("reset_on_mistake", defaults.reset_on_mistake)),
        selection_mode=_enum(SelectionMode, raw.get("selection", defaults.selection_mode.value), "selection", source),
        distractor_count=distractors,
        option_source=_enum(OptionSource, raw.get("options", defaults.option_source.value), "options", source),
        reveal_delay_ms=reveal,
    )


def _parse_items(raw: Any, source: str) -> Tuple[Item, ...]:
    if not isinstance(raw, list) or not raw:
        raise ConfigurationError(f"{source}: 'items' must be a non-empty list")
    items: List[Item] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{source}: every item must be a mapping")
        item_id = str(entry.get("id", "")).strip()
        if not item_id:
            raise ConfigurationError(f"{source}: item without an 'id'")
        if item_id in seen:
            raise ConfigurationError(f"{source}: duplicate item id '{item_id}'")
        seen.add(item_id)
        category = entry.get("category")
        items.append(
            Item(
                id=item_id,
                name=str(entry.get("name", item_id)).strip(),
                glyph=str(entry.get("glyph", "")),
                text=str(entry.get("text", "")).strip(),
                category=str(category).strip() if category is not None else None,
                choices=_parse_choices(item_id, entry.get("choices"), source),
                extras={k: v for k, v in entry.items() if k not in _ITEM_FIELDS},
            )
        )
    return tuple(items)


def _parse_choices(item_id: str, raw: Any, source: str) -> Tuple[Choice, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigurationError(f"{source}: choices of '{item_id}' must be a list")
    choices = []
    for idx, entry in enumerate(raw):
        if isinstance(entry, dict):
            text = str(entry.get("text", "")).strip()
            correct = bool(entry.get("correct", False))
        else:
            text, correct = str(entry).strip(), False
        if not text:
            raise ConfigurationError(f"{source}: empty choice in '{item_id}'")
        choices.append(Choice(id=f"{item_id}#{idx}", text=text, correct=correct))
    return tuple(choices)


def _parse_level(
    raw: Any,
    idx: int,
    items: Tuple[Item, ...],
    by_id: Mapping[str, Item],
    source: str,
) -> Level:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: level #{idx + 1} must be a mapping")
    number = raw.get("number", idx + 1)
    where = f"{source}: level {number}"

    selector = raw.get("items")
    take = raw.get("take")
    if selector is None and take is None:
        selector = "all"
    if take is not None:
        if not _positive_int(take):
            raise ConfigurationError(f"{where}: 'take' must be a positive integer")
        level_items = items[:take]
    elif selector == "all":
        level_items = items
    elif isinstance(selector, list):
        try:
            level_items = tuple(by_id[str(item_id)] for item_id in selector)
        except KeyError as e:
            raise ConfigurationError(f"{where}: unknown item id {e.args[0]!r}") from None
    else:
        raise ConfigurationError(f"{where}: 'items' must be a list of ids or 'all'")

    sequence = raw.get("sequence") or []
    if isinstance(sequence, str):
        # "CAT" spells a sequence of single-letter ids
        sequence = tuple(sequence)
    elif isinstance(sequence, list):
        sequence = tuple(str(step) for step in sequence)
    else:
        raise ConfigurationError(f"{where}: 'sequence' must be a list or a string")

    sequence_length = raw.get("sequence_length")
    required = raw.get("required_score")
    if required is None:
        if sequence:
            required = len(sequence)
        elif sequence_length is not None:
            required = sequence_length
        else:
            raise ConfigurationError(f"{where}: missing 'required_score'")

    return Level(
        number=number,
        items=tuple(level_items),
        required_score=required,
        description=str(raw.get("description", "")).strip(),
        time_limit=raw.get("time_limit"),
        sequence=sequence,
        sequence_length=sequence_length,
        difficulty=str(raw.get("difficulty", "easy")),
    )
