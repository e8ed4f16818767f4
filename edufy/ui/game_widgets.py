"""Play-area widgets: prompt, answer buttons, progress strip, drag-and-drop, memory cards, mascot."""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Union

from PySide6.QtCore import QByteArray, QMimeData, Qt, Signal
from PySide6.QtGui import QColor, QDrag, QPainter, QPen
from PySide6.QtWidgets import QFrame, QLabel, QPushButton, QSizePolicy, QVBoxLayout, QWidget

from edufy.core.items import Choice, Item
from edufy.ui.colors import HomeColors, blend_hex, readable_text_color

ITEM_MIME_TYPE = "application/x-edufy-item"


class PromptLabel(QLabel):
    """Large rounded card showing what the child has to find."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setWordWrap(True)
        self.setMinimumSize(220, 150)
        self.setMaximumWidth(900)
        self.show_prompt("", HomeColors.PRIMARY)

    def show_prompt(self, text: str, color: str, swatch: Optional[str] = None) -> None:
        """Show *text* on a card tinted with *color*; *swatch* fills it solid for color games."""
        if swatch:
            background = swatch
        else:
            background = (
                f"qlineargradient(x1:0, y1:0, x2:1, y2:1, stop:0 {blend_hex(color, '#FFFFFF', 0.3)}, stop:1 {color})"
            )
        fg = readable_text_color(swatch) if swatch else "white"
        # scenario text needs a smaller font than a single glyph
        font_px = 44 if len(text) <= 16 else 26 if len(text) <= 60 else 20
        self.setStyleSheet(
            f"""
            QLabel {{
                background: {background};
                color: {fg};
                border-radius: 28px;
                padding: 16px 28px;
                font-size: {font_px}px;
                font-weight: 900;
            }}
            """
        )
        self.setText(text)


class OptionButton(QPushButton):
    """One answer; remembers the item or quiz answer it stands for."""

    picked = Signal(object)

    def __init__(self, entry: Union[Item, Choice], text: str, color: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(text, parent)
        self.entry = entry
        self._color = color
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setMinimumSize(150, 90)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.clicked.connect(lambda: self.picked.emit(self.entry))
        border = blend_hex(color, "#FFFFFF", 0.4)
        self.setStyleSheet(
            f"""
            QPushButton {{
                background: {HomeColors.CARD_BG};
                color: {HomeColors.TEXT_PRIMARY};
                border: 3px solid {border};
                border-radius: 18px;
                padding: 10px;
                font-size: 22px;
                font-weight: 800;
            }}
            QPushButton:hover {{
                background: {HomeColors.CARD_BG_HOVER};
                border-color: {self._color};
            }}
            """
        )


class SequenceStripWidget(QWidget):
    """Row of boxes for sequential games: done (✓), current (highlighted), upcoming (gray)."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._labels: list[str] = []
        self._current_index = 0
        self.setFixedHeight(60)
        self.setMinimumWidth(200)

    def set_steps(self, labels: Sequence[str]) -> None:
        self._labels = list(labels)
        self.update()

    def set_current(self, index: int) -> None:
        self._current_index = max(0, min(index, len(self._labels)))
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        if not self._labels:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        box_size = 44 if len(self._labels) <= 12 else 30
        spacing = 8
        total_width = len(self._labels) * (box_size + spacing) - spacing
        start_x = max(0, (self.width() - total_width) // 2)
        y = (self.height() - box_size) // 2
        for i, label in enumerate(self._labels):
            x = start_x + i * (box_size + spacing)
            if i < self._current_index:
                painter.setBrush(QColor("#e8f5e9"))
                painter.setPen(QPen(QColor(HomeColors.CORRECT), 2))
                text_color = QColor(HomeColors.CORRECT)
                display = "✓"
            elif i == self._current_index:
                painter.setBrush(QColor("#e0f7fa"))
                painter.setPen(QPen(QColor(HomeColors.PRIMARY), 3))
                text_color = QColor(HomeColors.PRIMARY)
                display = label
            else:
                painter.setBrush(QColor(255, 255, 255, 100))
                painter.setPen(QPen(QColor("#b0bec5"), 1))
                text_color = QColor("#b0bec5")
                display = label
            painter.drawRoundedRect(x, y, box_size, box_size, 10, 10)
            painter.setPen(text_color)
            font = painter.font()
            font.setPointSize(16 if i == self._current_index else 13)
            font.setBold(i <= self._current_index)
            painter.setFont(font)
            painter.drawText(x, y, box_size, box_size, Qt.AlignCenter, display)


class DraggableItemCard(QLabel):
    """Item tile the child drags onto a drop zone."""

    def __init__(self, item: Item, text: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(text, parent)
        self.item = item
        self.setAlignment(Qt.AlignCenter)
        self.setWordWrap(True)
        self.setMinimumSize(120, 90)
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.setStyleSheet(
            f"""
            QLabel {{
                background: white;
                color: {HomeColors.TEXT_PRIMARY};
                border: 2px solid {HomeColors.PRIMARY_LIGHT};
                border-radius: 16px;
                padding: 8px;
                font-size: 20px;
                font-weight: 800;
            }}
            """
        )

    def mouseMoveEvent(self, event) -> None:
        if not event.buttons() & Qt.MouseButton.LeftButton:
            return
        mime = QMimeData()
        mime.setData(ITEM_MIME_TYPE, QByteArray(self.item.id.encode("utf-8")))
        drag = QDrag(self)
        drag.setMimeData(mime)
        drag.setPixmap(self.grab())
        drag.setHotSpot(event.position().toPoint())
        drag.exec(Qt.DropAction.MoveAction)


class DropZone(QFrame):
    """Labelled box that reports which item id was dropped on it."""

    dropped = Signal(str, str)

    def __init__(self, zone: str, title: str, color: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.zone = zone
        self._color = color
        self.setAcceptDrops(True)
        self.setMinimumSize(160, 140)
        layout = QVBoxLayout(self)
        label = QLabel(title)
        label.setAlignment(Qt.AlignCenter)
        label.setWordWrap(True)
        label.setStyleSheet(f"color: {color}; font-size: 18px; font-weight: 900; background: transparent; border: none;")
        layout.addWidget(label)
        self._set_highlight(False)

    def _set_highlight(self, on: bool) -> None:
        bg = blend_hex(self._color, "#FFFFFF", 0.75 if on else 0.9)
        self.setStyleSheet(
            f"QFrame {{ background: {bg}; border: 3px dashed {self._color}; border-radius: 20px; }}"
        )

    def dragEnterEvent(self, event) -> None:
        if event.mimeData().hasFormat(ITEM_MIME_TYPE):
            self._set_highlight(True)
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragLeaveEvent(self, event) -> None:
        self._set_highlight(False)
        super().dragLeaveEvent(event)

    def dropEvent(self, event) -> None:
        self._set_highlight(False)
        data = event.mimeData().data(ITEM_MIME_TYPE)
        if data.isEmpty():
            event.ignore()
            return
        event.acceptProposedAction()
        self.dropped.emit(bytes(data.data()).decode("utf-8"), self.zone)


class MemoryCardButton(QPushButton):
    """Face-down card of the memory grid."""

    def __init__(self, index: int, on_flip: Callable[[int], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.index = index
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setMinimumSize(90, 90)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.clicked.connect(lambda: on_flip(self.index))

    def show_face(self, text: str, face_up: bool, matched: bool) -> None:
        if matched:
            bg, border = "#e8f5e9", HomeColors.CORRECT
        elif face_up:
            bg, border = "white", HomeColors.PRIMARY
        else:
            bg, border = HomeColors.PRIMARY_LIGHT, HomeColors.PRIMARY
        self.setText(text if face_up or matched else "❓")
        self.setEnabled(not matched)
        self.setStyleSheet(
            f"QPushButton {{ background: {bg}; border: 3px solid {border}; border-radius: 16px; font-size: 36px; }}"
        )


class MascotWidget(QLabel):
    """Friendly face in a corner of the play area that reacts to answers."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.setWordWrap(True)
        self.setMaximumWidth(260)
        self.setStyleSheet(
            f"""
            QLabel {{
                background: rgba(255, 255, 255, 0.92);
                color: {HomeColors.TEXT_PRIMARY};
                border: 2px solid {HomeColors.AMBER};
                border-radius: 18px;
                padding: 8px 12px;
                font-size: 15px;
                font-weight: 700;
            }}
            """
        )
        self._corner = "bottom-right"

    def react(self, expression: str, message: str, corner: str) -> None:
        self.setText(f"<span style='font-size:34px'>{expression}</span><br>{message}")
        self._corner = corner
        self.adjustSize()
        self.place()
        self.show()
        self.raise_()

    def place(self) -> None:
        parent = self.parentWidget()
        if parent is None:
            return
        margin = 16
        left = self._corner.endswith("left")
        top = self._corner.startswith("top")
        x = margin if left else parent.width() - self.width() - margin
        y = margin if top else parent.height() - self.height() - margin
        self.move(max(0, x), max(0, y))
