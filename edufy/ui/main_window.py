"""Main application window: home screen with game cards and one screen per game kind."""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent, QColor
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from edufy.core.levels import GameDefinition, GameRepository
from edufy.core.rules import GameKind
from edufy.core.scoreboard import SessionScoreboard
from edufy.ui.colors import HomeColors
from edufy.ui.game_screen import ChoiceScreen, GameScreen, MemoryScreen, SortScreen
from edufy.ui.home_widgets import CoolBackground, GameCard, GlassCard, HomeStatCard
from edufy.ui.models import GameCardState
from edufy.ui.sound import SoundPlayer

logger = logging.getLogger(__name__)

_SCREEN_TYPES = {
    GameKind.CHOICE: ChoiceScreen,
    GameKind.SORT: SortScreen,
    GameKind.MEMORY: MemoryScreen,
}


class MainWindow(QMainWindow):
    """Home screen listing every game plus the game screens behind it.

    Session points and streaks come from the shared :class:`SessionScoreboard`;
    nothing survives closing the window.
    """

    def __init__(self, games: GameRepository, scoreboard: SessionScoreboard, sound: SoundPlayer) -> None:
        super().__init__()
        self._games = games
        self._scoreboard = scoreboard
        self._sound = sound
        self._unlock_all = os.environ.get("EDUFY_UNLOCK_ALL") == "1"
        self._active_screen: Optional[GameScreen] = None
        self._game_cards: List[GameCard] = []

        self._points_card: Optional[HomeStatCard] = None
        self._streak_card: Optional[HomeStatCard] = None
        self._best_streak_card: Optional[HomeStatCard] = None
        self._summary_label: Optional[QLabel] = None
        self._mute_button: Optional[QPushButton] = None

        self.setWindowTitle("Edufy")
        self._build_ui()
        self._refresh_home()
        QTimer.singleShot(0, self.showMaximized)

    def _build_ui(self) -> None:
        self._stack = QStackedWidget()
        self._home_screen = CoolBackground()
        self._stack.addWidget(self._home_screen)
        self.setCentralWidget(self._stack)

        self._screens: Dict[GameKind, GameScreen] = {}
        for kind, screen_type in _SCREEN_TYPES.items():
            screen = screen_type(sound=self._sound, scoreboard=self._scoreboard, unlock_all=self._unlock_all)
            screen.back_requested.connect(self._show_home_screen)
            self._stack.addWidget(screen)
            self._screens[kind] = screen

        home_layout = QVBoxLayout(self._home_screen)
        home_layout.setContentsMargins(16, 16, 16, 16)
        home_layout.setSpacing(20)

        header = GlassCard()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(24, 18, 24, 18)
        header_layout.setSpacing(16)

        title_col = QVBoxLayout()
        title = QLabel("🎈 Edufy")
        title.setStyleSheet(f"color: {HomeColors.PRIMARY_DARK}; font-size: 30px; font-weight: 900;")
        subtitle = QLabel("Pick a game and let's learn together!")
        subtitle.setStyleSheet(f"color: {HomeColors.TEXT_SECONDARY}; font-size: 15px; font-weight: 600;")
        self._summary_label = QLabel("")
        self._summary_label.setStyleSheet(f"color: {HomeColors.TEXT_MUTED}; font-size: 13px; font-weight: 600;")
        title_col.addWidget(title)
        title_col.addWidget(subtitle)
        title_col.addWidget(self._summary_label)
        header_layout.addLayout(title_col, 1)

        self._points_card = HomeStatCard("⭐", "Points", "0", HomeColors.AMBER)
        self._streak_card = HomeStatCard("🔥", "Streak", "0", HomeColors.CORAL)
        self._best_streak_card = HomeStatCard("🏅", "Best Streak", "0", QColor(HomeColors.LAVENDER).darker(120).name())
        for card in (self._points_card, self._streak_card, self._best_streak_card):
            card.setMinimumWidth(130)
            header_layout.addWidget(card, 0)

        self._mute_button = QPushButton("")
        self._mute_button.setFixedSize(48, 48)
        self._mute_button.setCursor(Qt.CursorShape.PointingHandCursor)
        self._mute_button.setStyleSheet("QPushButton { background: white; border-radius: 24px; font-size: 22px; }")
        self._mute_button.clicked.connect(self._toggle_mute)
        header_layout.addWidget(self._mute_button, 0, Qt.AlignTop)
        home_layout.addWidget(header, 0)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        scroll.setStyleSheet("QScrollArea { background: transparent; } QScrollArea > QWidget > QWidget { background: transparent; }")
        grid_host = QWidget()
        self._games_grid = QGridLayout(grid_host)
        self._games_grid.setContentsMargins(8, 8, 8, 8)
        self._games_grid.setSpacing(20)
        scroll.setWidget(grid_host)
        home_layout.addWidget(scroll, 1)

        columns = 4
        for idx, game in enumerate(self._games.all()):
            card = GameCard(on_click=self._open_game)
            self._games_grid.addWidget(card, idx // columns, idx % columns)
            self._game_cards.append(card)

        self._stack.setCurrentWidget(self._home_screen)

    def _refresh_home(self) -> None:
        """Sync game cards and session stats with the scoreboard."""
        games = self._games.all()
        finished = 0
        for card, game in zip(self._game_cards, games):
            progress = self._scoreboard.get_game_progress(game.key)
            card.set_state(
                GameCardState(
                    game=game,
                    completed_levels=len(progress.completed_levels),
                    game_complete=progress.game_complete,
                )
            )
            finished += int(progress.game_complete)
        if self._summary_label is not None:
            self._summary_label.setText(f"{finished}/{len(games)} games finished this session")

        points, streak, best = self._scoreboard.get_gamification()
        if self._points_card is not None:
            self._points_card.set_value(f"{points:,}")
        if self._streak_card is not None:
            self._streak_card.set_value(f"{streak}")
        if self._best_streak_card is not None:
            self._best_streak_card.set_value(f"{best}")
        if self._mute_button is not None:
            self._mute_button.setText("🔇" if self._sound.muted else "🔊")

    def _open_game(self, game_key: str) -> None:
        game: GameDefinition = self._games.get(game_key)
        screen = self._screens[game.kind]
        logger.debug("Showing %s screen for %s", game.kind.value, game_key)
        self._close_active_screen()
        self._active_screen = screen
        self._stack.setCurrentWidget(screen)
        screen.open_game(game)

    def _show_home_screen(self) -> None:
        self._close_active_screen()
        self._stack.setCurrentWidget(self._home_screen)
        self._refresh_home()

    def _close_active_screen(self) -> None:
        if self._active_screen is not None:
            self._active_screen.close_game()
            self._active_screen = None

    def _toggle_mute(self) -> None:
        self._sound.toggle_muted()
        self._refresh_home()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Cancel timers and pending engine callbacks before the window goes away."""
        self._close_active_screen()
        super().closeEvent(event)
