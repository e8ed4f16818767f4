"""Application entry point and setup for Edufy."""

import logging
import sys

from PySide6.QtGui import QFont, QGuiApplication
from PySide6.QtWidgets import QApplication

from edufy.core.levels import GameRepository
from edufy.core.scoreboard import SessionScoreboard
from edufy.ui.main_window import MainWindow
from edufy.ui.sound import SoundPlayer


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def configure_font(app: QApplication) -> None:
    """Use a rounded system font with color emoji fallbacks for glyph-heavy games."""
    app_font = QFont()
    app_font.setFamilies(
        [
            "Nunito",
            "Comic Neue",
            "Noto Sans",
            "Noto Color Emoji",  # Linux
            "Segoe UI Emoji",  # Windows
            "Apple Color Emoji",  # macOS
        ]
    )
    app_font.setPointSize(12)
    app.setFont(app_font)
    QGuiApplication.setFont(app_font)


def run() -> None:
    """Load the games, then start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Edufy")
    app.setApplicationDisplayName("Edufy")
    configure_font(app)

    games = GameRepository()
    scoreboard = SessionScoreboard()
    sound = SoundPlayer()

    window = MainWindow(games=games, scoreboard=scoreboard, sound=sound)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        window.setGeometry(screen.availableGeometry())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
