"""In-window overlays: level finished card and short feedback toasts."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QEvent, QPropertyAnimation, Qt, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QGraphicsOpacityEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from edufy.ui.colors import HomeColors

_TOAST_COLORS = {
    "success": HomeColors.CORRECT,
    "error": HomeColors.INCORRECT,
    "celebrate": HomeColors.CELEBRATE,
    "info": HomeColors.PRIMARY,
}


def _themed_card_container(radius: int = 20, object_name: str = "overlayContainer") -> QFrame:
    container = QFrame()
    container.setObjectName(object_name)
    container.setMinimumWidth(400)
    container.setMaximumWidth(520)
    container.setStyleSheet(
        f"""
        QFrame#{object_name} {{
            background: #ffffff;
            border: 1px solid rgba(0, 131, 143, 0.12);
            border-radius: {radius}px;
        }}
        """
    )
    shadow = QGraphicsDropShadowEffect(container)
    shadow.setBlurRadius(20)
    shadow.setOffset(0, 6)
    shadow.setColor(QColor(0, 80, 100, 25))
    container.setGraphicsEffect(shadow)
    return container


def _overlay_background(parent: QWidget, on_click: Callable[[], None]) -> QWidget:
    overlay_bg = QWidget(parent)
    overlay_bg.setStyleSheet("background: rgba(0, 0, 0, 0.2);")
    overlay_bg.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
    overlay_bg.setMinimumSize(1, 1)
    overlay_bg.mousePressEvent = lambda e: on_click()
    return overlay_bg


def secondary_button_style() -> str:
    return f"""
        QPushButton {{
            background: #fafafa;
            color: {HomeColors.TEXT_PRIMARY};
            padding: 10px 16px;
            border: 1px solid #e0e0e0;
            border-radius: 12px;
            font-weight: 700;
            font-size: 14px;
        }}
        QPushButton:hover {{
            background: #f0f0f0;
            border-color: {HomeColors.PRIMARY};
            color: {HomeColors.PRIMARY};
        }}
    """


def primary_button_style(color: str = HomeColors.PRIMARY) -> str:
    return f"""
        QPushButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {QColor(color).lighter(125).name()}, stop:1 {color});
            color: white;
            padding: 10px 16px;
            border: none;
            border-radius: 12px;
            font-weight: 700;
            font-size: 14px;
        }}
        QPushButton:hover {{ background: {color}; }}
        QPushButton:disabled {{ background: #cfd8dc; color: #eceff1; }}
    """


class _ParentSizedOverlay(QWidget):
    """Keeps the overlay covering its parent while shown."""

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)


class LevelCompletedOverlay(_ParentSizedOverlay):
    """Shown when a level is won; emits "next", "replay" or "home"."""

    closed = Signal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        main_layout = QGridLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setRowStretch(0, 1)
        main_layout.setColumnStretch(0, 1)
        main_layout.addWidget(_overlay_background(self, lambda: self._close("home")), 0, 0)

        container = _themed_card_container(object_name="levelCompletedContainer")
        content = QVBoxLayout(container)
        content.setContentsMargins(28, 24, 28, 24)
        content.setSpacing(18)

        self._icon_label = QLabel("🎉")
        self._icon_label.setAlignment(Qt.AlignCenter)
        self._icon_label.setStyleSheet("font-size: 48px;")
        content.addWidget(self._icon_label)

        self._title = QLabel("Level Complete!")
        self._title.setAlignment(Qt.AlignCenter)
        self._title.setStyleSheet(f"color: {HomeColors.PRIMARY}; font-size: 22px; font-weight: 900;")
        content.addWidget(self._title)

        self._message = QLabel("")
        self._message.setAlignment(Qt.AlignCenter)
        self._message.setWordWrap(True)
        self._message.setStyleSheet(f"color: {HomeColors.TEXT_PRIMARY}; font-size: 15px; font-weight: 500;")
        content.addWidget(self._message)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(10)
        self._home_btn = QPushButton("Home")
        self._replay_btn = QPushButton("Play Again")
        self._next_btn = QPushButton("Next Level ▶")
        for btn, action, style in (
            (self._home_btn, "home", secondary_button_style()),
            (self._replay_btn, "replay", secondary_button_style()),
            (self._next_btn, "next", primary_button_style()),
        ):
            btn.setStyleSheet(style)
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            btn.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
            btn.clicked.connect(lambda _checked=False, a=action: self._close(a))
            btn_row.addWidget(btn, 1)
        content.addLayout(btn_row)

        main_layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)

    def present(self, level_number: int, score: int, game_complete: bool) -> None:
        if game_complete:
            self._icon_label.setText("🏆")
            self._title.setText("Congratulations!")
            self._message.setText(f"You've completed all levels! Final score: {score}")
        else:
            self._icon_label.setText("🎉")
            self._title.setText(f"Level {level_number} Complete!")
            self._message.setText(f"You scored {score}. Ready for the next one?")
        self._next_btn.setVisible(not game_complete)
        self._replay_btn.setText("Play Again" if not game_complete else "Start Over")
        self._update_geometry()
        self.raise_()
        self.show()

    def _close(self, action: str) -> None:
        self.hide()
        self.closed.emit(action)


class ToastOverlay(QLabel):
    """Short pill message that fades out on its own."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._effect = QGraphicsOpacityEffect(self)
        self._effect.setOpacity(0.0)
        self.setGraphicsEffect(self._effect)
        self._anim = QPropertyAnimation(self._effect, b"opacity", self)
        self._anim.setKeyValueAt(0.0, 0.0)
        self._anim.setKeyValueAt(0.15, 1.0)
        self._anim.setKeyValueAt(0.8, 1.0)
        self._anim.setKeyValueAt(1.0, 0.0)
        self._anim.finished.connect(self.hide)
        self.hide()

    def show_message(self, text: str, kind: str = "info", duration_ms: int = 1500) -> None:
        if not text:
            return
        color = _TOAST_COLORS.get(kind, HomeColors.PRIMARY)
        self.setStyleSheet(
            f"QLabel {{ background: {color}; color: white; border-radius: 22px;"
            " padding: 10px 26px; font-size: 20px; font-weight: 900; }"
        )
        self.setText(text)
        self.adjustSize()
        parent = self.parentWidget()
        if parent is not None:
            self.move((parent.width() - self.width()) // 2, max(12, parent.height() // 8))
        self._anim.stop()
        self._anim.setDuration(max(200, int(duration_ms)))
        self.show()
        self.raise_()
        self._anim.start()
