"""Home screen widgets: background, glass card, stat cards, progress bar, game cards."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt, QPoint, QRectF
from PySide6.QtGui import (
    QBrush,
    QColor,
    QFont,
    QLinearGradient,
    QPainter,
    QPen,
    QRadialGradient,
)
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from edufy.ui.colors import HomeColors, blend_hex
from edufy.ui.models import GameCardState, LevelState


class CoolBackground(QWidget):
    """Warm gradient background with soft bubbles and faint playful glyphs."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        gradient = QLinearGradient(0, 0, self.width(), self.height())
        gradient.setColorAt(0.0, QColor(HomeColors.BG_TOP))
        gradient.setColorAt(0.5, QColor(HomeColors.BG_MIDDLE))
        gradient.setColorAt(1.0, QColor(HomeColors.BG_BOTTOM))
        painter.fillRect(self.rect(), gradient)

        painter.setPen(Qt.NoPen)
        bubbles = [(0.85, 0.15, 220, 70), (0.12, 0.82, 170, 55), (0.2, 0.3, 90, 40), (0.7, 0.62, 70, 40)]
        for x_ratio, y_ratio, radius, alpha in bubbles:
            radial = QRadialGradient(self.width() * x_ratio, self.height() * y_ratio, radius)
            radial.setColorAt(0, QColor(255, 255, 255, alpha))
            radial.setColorAt(1, QColor(255, 255, 255, 0))
            painter.setBrush(radial)
            painter.drawEllipse(QPoint(int(self.width() * x_ratio), int(self.height() * y_ratio)), radius, radius)

        painter.setOpacity(0.08)
        font = painter.font()
        font.setPointSize(72)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor(HomeColors.PRIMARY_DARK))
        glyphs = [("A", 0.08, 0.22), ("3", 0.86, 0.35), ("★", 0.14, 0.78), ("●", 0.78, 0.83), ("?", 0.48, 0.52)]
        for glyph, x, y in glyphs:
            painter.drawText(int(self.width() * x), int(self.height() * y), glyph)


class GlassCard(QFrame):
    """Translucent rounded panel used for prompts and toolbars."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("glassCard")
        self.setStyleSheet(
            f"""
            QFrame#glassCard {{
                background: {HomeColors.CARD_BG};
                border: 1px solid {HomeColors.CARD_BORDER};
                border-radius: 20px;
            }}
            """
        )
        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(30)
        shadow.setOffset(0, 8)
        shadow.setColor(QColor(0, 50, 70, 40))
        self.setGraphicsEffect(shadow)


class HomeStatCard(QFrame):
    def __init__(self, icon: str, label: str, value: str, bg_color: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("homeStatCard")
        self.setStyleSheet(
            f"""
            QFrame#homeStatCard {{
                background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                    stop:0 {bg_color}, stop:1 {QColor(bg_color).darker(112).name()});
                border-radius: 16px;
                border: none;
            }}
            """
        )
        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 12, 18, 12)
        layout.setSpacing(2)
        label_widget = QLabel(f"{icon} {label}")
        label_widget.setStyleSheet("color: rgba(255,255,255,0.92); font-size: 12px; font-weight: 600;")
        layout.addWidget(label_widget)
        self.value_label = QLabel(str(value))
        self.value_label.setStyleSheet("color: white; font-size: 24px; font-weight: 900;")
        layout.addWidget(self.value_label)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(16)
        shadow.setOffset(0, 4)
        shadow.setColor(QColor(0, 0, 0, 50))
        self.setGraphicsEffect(shadow)

    def set_value(self, value: str) -> None:
        self.value_label.setText(str(value))


class HomeProgressBar(QWidget):
    """Rounded gradient progress bar, optionally with the percentage drawn on the fill."""

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        *,
        track_color: Optional[str] = None,
        show_percentage: bool = False,
        height: int = 10,
    ) -> None:
        super().__init__(parent)
        self._value = 0
        self._max_value = 100
        self._color_start = HomeColors.PRIMARY_LIGHT
        self._color_end = HomeColors.PRIMARY
        self._track_color = track_color
        self._show_percentage = show_percentage
        self.setFixedHeight(height)
        self.setMinimumWidth(100)

    def set_progress(self, value: int, max_value: int, color_start: Optional[str] = None, color_end: Optional[str] = None) -> None:
        self._value = int(value)
        self._max_value = int(max_value) if int(max_value) > 0 else 1
        if color_start:
            self._color_start = color_start
        if color_end:
            self._color_end = color_end
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        painter.setBrush(QColor(self._track_color) if self._track_color else QColor(0, 0, 0, 25))
        painter.setPen(Qt.NoPen)
        radius = min(8, self.height() // 2)
        painter.drawRoundedRect(0, 0, self.width(), self.height(), radius, radius)

        fraction = min(1.0, self._value / self._max_value)
        progress_width = int(fraction * self.width())
        if progress_width <= 0:
            return
        gradient = QLinearGradient(0, 0, progress_width, 0)
        gradient.setColorAt(0, QColor(self._color_start))
        gradient.setColorAt(1, QColor(self._color_end))
        painter.setBrush(gradient)
        painter.drawRoundedRect(0, 0, progress_width, self.height(), radius, radius)

        if self._show_percentage:
            font = painter.font()
            font.setPointSize(max(9, self.height() - 4))
            font.setWeight(QFont.Weight.DemiBold)
            painter.setFont(font)
            painter.setPen(QColor("#ffffff"))
            painter.drawText(0, 0, progress_width, self.height(), Qt.AlignCenter, f"{round(fraction * 100)}%")


class GameCard(QWidget):
    """Clickable home tile for one game with a level progress ring."""

    def __init__(self, *, on_click: Callable[[str], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._on_click = on_click
        self._game_key = ""
        self._progress = 0.0
        self._base_color = HomeColors.PRIMARY

        self.setObjectName("gameCard")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_Hover, True)
        self.setCursor(Qt.PointingHandCursor)
        self.setMinimumSize(190, 170)

        self._icon = QLabel("")
        self._icon.setObjectName("gameCardIcon")
        self._icon.setAlignment(Qt.AlignCenter)
        self._icon.setMinimumHeight(72)

        self._title = QLabel("")
        self._title.setObjectName("gameCardTitle")
        self._title.setWordWrap(True)
        self._title.setAlignment(Qt.AlignCenter)

        self._progress_text = QLabel("")
        self._progress_text.setObjectName("gameCardProgress")
        self._progress_text.setAlignment(Qt.AlignCenter)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(14, 12, 14, 12)
        layout.setSpacing(6)
        layout.addWidget(self._icon, 1)
        layout.addWidget(self._title)
        layout.addWidget(self._progress_text)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(26)
        shadow.setOffset(0, 10)
        shadow.setColor(QColor(15, 23, 42, 80))
        self.setGraphicsEffect(shadow)

    def _apply_styles(self) -> None:
        card_top = blend_hex(self._base_color, "#FFFFFF", 0.18)
        card_bottom = blend_hex(self._base_color, "#000000", 0.08)
        self.setStyleSheet(
            f"""
            QWidget#gameCard {{
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 {card_top},
                    stop:1 {card_bottom}
                );
                border-radius: 16px;
                border: 1px solid rgba(255, 255, 255, 0.40);
            }}
            QWidget#gameCard:hover {{
                border: 2px solid rgba(255, 255, 255, 0.85);
            }}
            QLabel#gameCardIcon {{
                font-size: 40px;
            }}
            QLabel#gameCardTitle {{
                color: rgba(255, 255, 255, 0.97);
                font-weight: 900;
                font-size: 15px;
            }}
            QLabel#gameCardProgress {{
                color: rgba(255, 255, 255, 0.90);
                font-weight: 800;
                font-size: 12px;
            }}
            """
        )

    def set_state(self, state: GameCardState) -> None:
        game = state.game
        total = max(1, game.level_count)
        completed = max(0, min(state.completed_levels, total))
        self._game_key = game.key
        self._base_color = game.color
        self._progress = completed / float(total)
        self._icon.setText("🏆" if state.game_complete else game.icon)
        self._title.setText(game.title)
        self._progress_text.setText(f"{completed}/{total} levels")
        self.setToolTip(game.description)
        self._apply_styles()
        self.update()

    def mousePressEvent(self, event) -> None:
        if self._game_key:
            self._on_click(self._game_key)
        super().mousePressEvent(event)

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        if self._progress <= 0:
            return
        r = self._icon.geometry()
        size = min(r.width(), r.height())
        ring_rect = QRectF(r.center().x() - size / 2 + 4, r.center().y() - size / 2 + 4, size - 8, size - 8)

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        bg_pen = QPen(QColor(255, 255, 255, 90))
        bg_pen.setWidth(6)
        bg_pen.setCapStyle(Qt.RoundCap)
        painter.setPen(bg_pen)
        painter.drawArc(ring_rect, 90 * 16, -360 * 16)

        grad = QLinearGradient(ring_rect.topLeft(), ring_rect.bottomRight())
        grad.setColorAt(0.0, QColor(255, 255, 255, 230))
        grad.setColorAt(1.0, QColor(255, 255, 255, 170))
        pen = QPen(QBrush(grad), 6)
        pen.setCapStyle(Qt.RoundCap)
        painter.setPen(pen)
        painter.drawArc(ring_rect, 90 * 16, -int(360 * 16 * self._progress))


class LevelChip(QLabel):
    """Round level button for the in-game level picker: ✓ done, number when open, 🔒 locked."""

    def __init__(self, *, on_click: Callable[[int], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._on_click = on_click
        self._index = 0
        self._unlocked = False
        self.setAlignment(Qt.AlignCenter)
        self.setFixedSize(40, 40)

    def set_state(self, index: int, state: LevelState, color: str) -> None:
        self._index = index
        self._unlocked = state.unlocked
        if not state.unlocked:
            text, bg, fg = "🔒", "rgba(255,255,255,0.45)", HomeColors.TEXT_MUTED
        elif state.completed:
            text, bg, fg = "✓", HomeColors.CORRECT, "#FFFFFF"
        else:
            text, bg, fg = str(state.level.number), "rgba(255,255,255,0.9)", color
        border = f"3px solid {color}" if state.is_current else "1px solid rgba(0,0,0,0.08)"
        self.setText(text)
        self.setToolTip(state.level.description or f"Level {state.level.number}")
        self.setCursor(Qt.PointingHandCursor if state.unlocked else Qt.ArrowCursor)
        self.setStyleSheet(
            f"QLabel {{ background: {bg}; color: {fg}; border: {border}; border-radius: 20px;"
            " font-size: 15px; font-weight: 900; }"
        )

    def mousePressEvent(self, event) -> None:
        if self._unlocked:
            self._on_click(self._index)
        super().mousePressEvent(event)


class LevelPicker(QWidget):
    """Row of LevelChips for the current game."""

    def __init__(self, *, on_level_clicked: Callable[[int], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._on_level_clicked = on_level_clicked
        self._chips: list[LevelChip] = []
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(8)
        self._layout.addStretch(1)

    def set_level_states(self, states: list[LevelState], color: str) -> None:
        while len(self._chips) < len(states):
            chip = LevelChip(on_click=self._on_level_clicked, parent=self)
            self._layout.insertWidget(self._layout.count() - 1, chip)
            self._chips.append(chip)
        for i, state in enumerate(states):
            self._chips[i].set_state(i, state, color)
            self._chips[i].show()
        for chip in self._chips[len(states):]:
            chip.hide()
