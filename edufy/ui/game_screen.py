"""Game screens: one per game kind, all driving an engine from Qt events."""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from edufy.core.engine import LevelEngine, Outcome, OutcomeEvent, RoundEngine
from edufy.core.items import Item
from edufy.core.levels import GameDefinition
from edufy.core.memory import MemoryEngine
from edufy.core.rules import OptionSource, SelectionMode
from edufy.core.scoreboard import SessionScoreboard
from edufy.ui.colors import HomeColors
from edufy.ui.game_widgets import (
    DraggableItemCard,
    DropZone,
    MascotWidget,
    MemoryCardButton,
    OptionButton,
    PromptLabel,
    SequenceStripWidget,
)
from edufy.ui.home_widgets import CoolBackground, GlassCard, HomeProgressBar, LevelPicker
from edufy.ui.models import answer_notes, build_level_states, display_text, feedback_for, open_options
from edufy.ui.overlays import LevelCompletedOverlay, ToastOverlay, secondary_button_style
from edufy.ui.qt_scheduler import QtScheduler
from edufy.ui.sound import SoundPlayer

logger = logging.getLogger(__name__)

# most important first: one user action can finish a level and the game at once
_PRIORITY = [
    Outcome.GAME_COMPLETE,
    Outcome.LEVEL_COMPLETE,
    Outcome.TIME_UP,
    Outcome.INCORRECT,
    Outcome.CORRECT,
    Outcome.LEVEL_STARTED,
]


def _clear_layout(layout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        w = item.widget()
        if w is not None:
            w.setParent(None)
            w.deleteLater()


class GameScreen(CoolBackground):
    """Header, level picker, mascot and overlays shared by every game screen.

    Every user action runs through :meth:`_dispatch`, which collects the
    outcome events the engine emits, reacts to the most important one and
    redraws.
    """

    back_requested = Signal()

    def __init__(
        self,
        *,
        sound: SoundPlayer,
        scoreboard: SessionScoreboard,
        unlock_all: bool = False,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._sound = sound
        self._scoreboard = scoreboard
        self._unlock_all = unlock_all
        self._game: Optional[GameDefinition] = None
        self._engine: Optional[LevelEngine] = None
        self._events: List[OutcomeEvent] = []
        self._scheduler = QtScheduler(self, on_fired=self.render)

        self._countdown = QTimer(self)
        self._countdown.setInterval(1000)
        self._countdown.timeout.connect(self._on_tick)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(14)
        layout.addWidget(self._build_header())

        self._instructions = QLabel("")
        self._instructions.setAlignment(Qt.AlignCenter)
        self._instructions.setWordWrap(True)
        self._instructions.setStyleSheet(f"color: {HomeColors.TEXT_PRIMARY}; font-size: 20px; font-weight: 800;")
        layout.addWidget(self._instructions)

        play_card = GlassCard()
        self._play_layout = QVBoxLayout(play_card)
        self._play_layout.setContentsMargins(20, 20, 20, 20)
        self._play_layout.setSpacing(16)
        self._build_play_area(self._play_layout)
        layout.addWidget(play_card, 1)

        self._mascot = MascotWidget(self)
        self._mascot.hide()
        self._toast = ToastOverlay(self)
        self._level_overlay = LevelCompletedOverlay(self)
        self._level_overlay.hide()
        self._level_overlay.closed.connect(self._on_overlay_closed)

    # ---- construction -----------------------------------------------------

    def _build_header(self) -> QWidget:
        header = GlassCard()
        outer = QVBoxLayout(header)
        outer.setContentsMargins(16, 12, 16, 12)
        outer.setSpacing(8)

        row = QHBoxLayout()
        row.setSpacing(12)
        back = QPushButton("← Home")
        back.setStyleSheet(secondary_button_style())
        back.setCursor(Qt.CursorShape.PointingHandCursor)
        back.clicked.connect(self.back_requested.emit)
        row.addWidget(back, 0)

        self._title_label = QLabel("")
        self._title_label.setStyleSheet(f"color: {HomeColors.PRIMARY_DARK}; font-size: 22px; font-weight: 900;")
        row.addWidget(self._title_label, 1)

        self._level_pill = QLabel("")
        self._level_pill.setStyleSheet(
            f"background: {HomeColors.PRIMARY}; color: white; border-radius: 12px; padding: 4px 12px;"
            " font-size: 13px; font-weight: 800;"
        )
        row.addWidget(self._level_pill, 0)

        self._extra_label = QLabel("")
        self._extra_label.setStyleSheet(f"color: {HomeColors.TEXT_SECONDARY}; font-size: 14px; font-weight: 700;")
        row.addWidget(self._extra_label, 0)

        self._timer_label = QLabel("")
        self._timer_label.setStyleSheet(f"color: {HomeColors.INCORRECT}; font-size: 18px; font-weight: 900;")
        row.addWidget(self._timer_label, 0)

        self._points_label = QLabel("")
        self._points_label.setStyleSheet(f"color: {HomeColors.TEXT_PRIMARY}; font-size: 16px; font-weight: 800;")
        row.addWidget(self._points_label, 0)

        self._mute_button = QPushButton("")
        self._mute_button.setFixedSize(40, 40)
        self._mute_button.setCursor(Qt.CursorShape.PointingHandCursor)
        self._mute_button.setStyleSheet("QPushButton { background: white; border-radius: 20px; font-size: 18px; }")
        self._mute_button.clicked.connect(self._toggle_mute)
        row.addWidget(self._mute_button, 0)

        self._volume_slider = QSlider(Qt.Orientation.Horizontal)
        self._volume_slider.setRange(0, 100)
        self._volume_slider.setFixedWidth(110)
        self._volume_slider.setToolTip("Volume")
        self._volume_slider.setValue(round(self._sound.volume * 100))
        self._volume_slider.valueChanged.connect(self._on_volume_changed)
        row.addWidget(self._volume_slider, 0)
        outer.addLayout(row)

        bottom = QHBoxLayout()
        bottom.setSpacing(12)
        self._level_picker = LevelPicker(on_level_clicked=self._pick_level)
        bottom.addWidget(self._level_picker, 1)
        self._score_label = QLabel("")
        self._score_label.setStyleSheet(f"color: {HomeColors.TEXT_SECONDARY}; font-size: 14px; font-weight: 700;")
        bottom.addWidget(self._score_label, 0)
        self._score_bar = HomeProgressBar(track_color=HomeColors.PROGRESS_TRACK, height=14)
        self._score_bar.setFixedWidth(220)
        bottom.addWidget(self._score_bar, 0)
        outer.addLayout(bottom)
        return header

    def _build_play_area(self, layout: QVBoxLayout) -> None:
        raise NotImplementedError

    def create_engine(self, game: GameDefinition) -> LevelEngine:
        raise NotImplementedError

    # ---- lifecycle --------------------------------------------------------

    @property
    def engine(self) -> Optional[LevelEngine]:
        return self._engine

    def open_game(self, game: GameDefinition, level_index: int = 0) -> None:
        self.close_game()
        self._game = game
        engine = self.create_engine(game)
        engine.subscribe(self._collect)
        self._scoreboard.attach(engine)
        self._engine = engine
        self._title_label.setText(f"{game.icon} {game.title}")
        self._instructions.setText(game.prompt)
        logger.info("Opening game %s", game.key)
        self._dispatch(engine.start_level, level_index)

    def close_game(self) -> None:
        """Stop timers and detach the engine; nothing scheduled fires afterwards."""
        self._countdown.stop()
        self._level_overlay.hide()
        if self._engine is None:
            return
        self._engine.close()
        self._engine.unsubscribe(self._collect)
        self._scoreboard.detach(self._engine)
        self._engine = None

    # ---- event flow -------------------------------------------------------

    def _collect(self, event: OutcomeEvent) -> None:
        self._events.append(event)

    def _dispatch(self, action: Callable, *args) -> None:
        if self._engine is None:
            return
        self._events = []
        action(*args)
        events, self._events = self._events, []
        if events:
            self._present(events)
        self.render()

    def _present(self, events: List[OutcomeEvent]) -> None:
        engine = self._engine
        top = min(events, key=lambda e: _PRIORITY.index(e.outcome))
        cue = feedback_for(top.outcome, engine.level.description)
        self._mascot.react(cue.expression, cue.message, cue.corner)
        self._toast.show_message(cue.toast, cue.toast_kind)
        self._sound.play(cue.sound)
        self.on_events(events)

        if any(e.outcome == Outcome.LEVEL_STARTED for e in events):
            self._countdown.stop()
        if any(e.outcome == Outcome.LEVEL_COMPLETE for e in events):
            self._countdown.stop()
            self._level_overlay.present(engine.level.number, engine.score, engine.is_game_complete)
        elif engine.time_remaining is not None and not self._countdown.isActive():
            self._countdown.start()

    def on_events(self, events: List[OutcomeEvent]) -> None:
        """Hook for screens that react to particular outcomes."""

    def _on_tick(self) -> None:
        if self._engine is not None:
            self._dispatch(self._engine.tick)

    def _pick_level(self, index: int) -> None:
        if self._engine is not None:
            self._dispatch(self._engine.start_level, index)

    def _on_overlay_closed(self, action: str) -> None:
        engine = self._engine
        if engine is None:
            return
        if action == "next":
            self._dispatch(engine.advance_level)
        elif action == "replay":
            self._dispatch(engine.restart_game if engine.is_game_complete else engine.reset_level)
        else:
            self.back_requested.emit()

    def _toggle_mute(self) -> None:
        self._sound.toggle_muted()
        self.render()

    def _on_volume_changed(self, value: int) -> None:
        self._sound.set_volume(value / 100)

    # ---- rendering --------------------------------------------------------

    def render(self) -> None:
        engine = self._engine
        if engine is None or self._game is None:
            return
        level = engine.level
        self._level_pill.setText(f"Level {level.number}/{engine.level_count}")
        self._score_label.setText(f"Score {engine.score}/{engine.required_score}")
        self._score_bar.set_progress(engine.score, engine.required_score)
        remaining = engine.time_remaining
        self._timer_label.setText(f"⏱ {remaining}s" if remaining is not None else "")
        self._points_label.setText(f"⭐ {self._scoreboard.total_points:,}  🔥 {self._scoreboard.current_streak}")
        self._mute_button.setText("🔇" if self._sound.muted else "🔊")
        self._volume_slider.blockSignals(True)
        self._volume_slider.setValue(round(self._sound.volume * 100))
        self._volume_slider.setEnabled(not self._sound.muted)
        self._volume_slider.blockSignals(False)
        progress = self._scoreboard.get_game_progress(self._game.key)
        states = build_level_states(self._game, progress.completed_levels, engine.state.level_index, self._unlock_all)
        self._level_picker.set_level_states(states, self._game.color)
        self.render_play_area()

    def render_play_area(self) -> None:
        raise NotImplementedError

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._mascot.place()


class ChoiceScreen(GameScreen):
    """Prompt plus answer buttons; covers item games and scenario quizzes."""

    def _build_play_area(self, layout: QVBoxLayout) -> None:
        self._prompt = PromptLabel()
        layout.addWidget(self._prompt, 0, Qt.AlignHCenter)

        self._sound_button = QPushButton("🔊 Play Sound")
        self._sound_button.setStyleSheet(secondary_button_style())
        self._sound_button.setCursor(Qt.CursorShape.PointingHandCursor)
        self._sound_button.clicked.connect(self._play_target_sound)
        layout.addWidget(self._sound_button, 0, Qt.AlignHCenter)

        self._strip = SequenceStripWidget()
        layout.addWidget(self._strip)

        options = QWidget()
        self._options_grid = QGridLayout(options)
        self._options_grid.setSpacing(14)
        layout.addWidget(options, 1)

        self._explanation = QLabel("")
        self._explanation.setWordWrap(True)
        self._explanation.setAlignment(Qt.AlignCenter)
        self._explanation.setStyleSheet(
            f"background: white; color: {HomeColors.TEXT_PRIMARY}; border-left: 6px solid {HomeColors.AMBER};"
            " border-radius: 12px; padding: 10px 16px; font-size: 15px;"
        )
        self._explanation.hide()
        layout.addWidget(self._explanation)
        self._round_key = None

    def create_engine(self, game: GameDefinition) -> RoundEngine:
        return RoundEngine(game, scheduler=self._scheduler)

    @property
    def _walks_sequence(self) -> bool:
        rules = self._game.rules
        return rules.selection_mode == SelectionMode.SEQUENTIAL and rules.option_source == OptionSource.ITEMS

    def render_play_area(self) -> None:
        engine: RoundEngine = self._engine
        game = self._game
        target = engine.current_target
        if target is None:
            return

        if self._walks_sequence:
            self._strip.set_steps([display_text(step, game.option_fields, " ") for step in engine.sequence])
            self._strip.set_current(engine.sequence_position)
            self._strip.show()
            self._prompt.show_prompt(engine.level.description or game.prompt, game.color)
        else:
            self._strip.hide()
            swatch = target.extras.get("hex")
            fields = [f for f in game.prompt_fields if f != "sound"]
            text = display_text(target, fields) if fields else ""
            self._prompt.show_prompt("" if swatch else (text or "🔊"), game.color, swatch=swatch)
        has_sound = "sound" in game.prompt_fields
        self._sound_button.setVisible(has_sound)

        round_key = (engine.state.generation, engine.state.round_number)
        if round_key != self._round_key:
            self._round_key = round_key
            if has_sound:
                self._play_target_sound()

        _clear_layout(self._options_grid)
        columns = 2 if len(engine.options) <= 4 else 3
        for idx, entry in enumerate(engine.options):
            fields = game.option_fields if isinstance(entry, Item) else ("text",)
            button = OptionButton(entry, display_text(entry, fields, "  "), game.color)
            button.setEnabled(not engine.is_level_complete)
            button.picked.connect(self._answer)
            self._options_grid.addWidget(button, idx // columns, idx % columns)

    def _answer(self, entry) -> None:
        self._sound.play("click")
        self._dispatch(self._engine.submit_answer, entry)

    def _play_target_sound(self) -> None:
        target = self._engine.current_target if self._engine is not None else None
        if target is not None and target.extras.get("sound"):
            self._sound.play(str(target.extras["sound"]))

    def on_events(self, events: List[OutcomeEvent]) -> None:
        answered = [e for e in events if e.outcome in (Outcome.CORRECT, Outcome.INCORRECT)]
        if answered:
            note = answer_notes(answered[-1].outcome, answered[-1].item)
        elif any(e.outcome == Outcome.LEVEL_STARTED for e in events):
            note = ""
        else:
            return
        self._explanation.setText(note)
        self._explanation.setVisible(bool(note))


class SortScreen(GameScreen):
    """Drag the target card into its box; one shared box when items have no category."""

    _SHARED_ZONE = "timeline"

    def _build_play_area(self, layout: QVBoxLayout) -> None:
        self._prompt = PromptLabel()
        layout.addWidget(self._prompt, 0, Qt.AlignHCenter)
        self._strip = SequenceStripWidget()
        layout.addWidget(self._strip)

        cards = QWidget()
        self._cards_row = QHBoxLayout(cards)
        self._cards_row.setSpacing(14)
        layout.addWidget(cards)

        zones = QWidget()
        self._zones_row = QHBoxLayout(zones)
        self._zones_row.setSpacing(18)
        layout.addWidget(zones, 1)
        self._zones_generation: Optional[int] = None

    def create_engine(self, game: GameDefinition) -> RoundEngine:
        return RoundEngine(game, scheduler=self._scheduler)

    def _zones(self) -> Dict[str, str]:
        zones: Dict[str, str] = {}
        for item in self._engine.level.items:
            if item.category is not None and item.category not in zones:
                zones[item.category] = f"{item.glyph} {item.category.title()}".strip()
        return zones or {self._SHARED_ZONE: "📅 Drop here"}

    def render_play_area(self) -> None:
        engine: RoundEngine = self._engine
        game = self._game
        target = engine.current_target
        if target is None:
            return

        sequential = game.rules.selection_mode == SelectionMode.SEQUENTIAL
        self._strip.setVisible(sequential)
        if sequential:
            # steps not yet placed stay hidden, the order is the puzzle
            position = engine.sequence_position
            self._strip.set_steps(
                [step.glyph or step.name if i < position else "?" for i, step in enumerate(engine.sequence)]
            )
            self._strip.set_current(position)
            self._prompt.show_prompt(engine.level.description or game.prompt, game.color)
        else:
            self._prompt.show_prompt(f"Where does {display_text(target, game.option_fields, ' ')} go?", game.color)

        _clear_layout(self._cards_row)
        self._cards_row.addStretch(1)
        entries = open_options(engine.options, engine.sequence, engine.sequence_position) if sequential else engine.options
        for entry in entries:
            card = DraggableItemCard(entry, display_text(entry, game.option_fields, "\n"))
            card.setEnabled(not engine.is_level_complete)
            self._cards_row.addWidget(card)
        self._cards_row.addStretch(1)

        if self._zones_generation != engine.state.generation:
            self._zones_generation = engine.state.generation
            _clear_layout(self._zones_row)
            for zone, title in self._zones().items():
                box = DropZone(zone, title, game.color)
                box.dropped.connect(self._on_drop)
                self._zones_row.addWidget(box, 1)

    def _on_drop(self, item_id: str, zone: str) -> None:
        engine: RoundEngine = self._engine
        if engine is None:
            return
        dragged = next((e for e in engine.options if e.id == item_id), None)
        if dragged is None:
            logger.debug("Ignoring drop of unknown item %s", item_id)
            return
        self._dispatch(engine.on_dropped, dragged, zone)


class MemoryScreen(GameScreen):
    """Grid of face-down cards; pairs stay open once found."""

    def _build_play_area(self, layout: QVBoxLayout) -> None:
        grid_host = QWidget()
        self._grid = QGridLayout(grid_host)
        self._grid.setSpacing(10)
        layout.addWidget(grid_host, 1)
        self._buttons: List[MemoryCardButton] = []
        self._grid_generation: Optional[int] = None

    def create_engine(self, game: GameDefinition) -> MemoryEngine:
        return MemoryEngine(game, scheduler=self._scheduler)

    def render_play_area(self) -> None:
        engine: MemoryEngine = self._engine
        cards = engine.cards
        if self._grid_generation != engine.state.generation:
            self._grid_generation = engine.state.generation
            _clear_layout(self._grid)
            columns = max(2, math.ceil(math.sqrt(len(cards))))
            self._buttons = []
            for card in cards:
                button = MemoryCardButton(card.index, self._flip)
                self._grid.addWidget(button, card.index // columns, card.index % columns)
                self._buttons.append(button)
        for card, button in zip(cards, self._buttons):
            button.show_face(card.item.glyph or card.item.name, card.face_up, card.matched)
        self._extra_label.setText(f"Moves {engine.moves}  Pairs {engine.pairs_found}/{len(engine.level.items)}")

    def _flip(self, index: int) -> None:
        self._sound.play("click")
        self._dispatch(self._engine.flip, index)

    def close_game(self) -> None:
        super().close_game()
        self._extra_label.setText("")
