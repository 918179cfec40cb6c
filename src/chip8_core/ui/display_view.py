# src/chip8_core/ui/display_view.py
"""
フレームバッファを表示するウィジェット。
コアから取得した不変のスナップショットを指定倍率で描画します。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtCore import QSize
from PySide6.QtGui import QPainter, QColor, QPaintEvent

from chip8_core.common.types import PixelRows
from chip8_core.arch.chip8.framebuffer import WIDTH, HEIGHT

# @intent:responsibility 1ビットのピクセル格子を拡大して描画します。
class DisplayView(QWidget):
    """
    フレームバッファのスナップショットを描画するウィジェット。
    コアは描画を行わず、ホストがupdate_frameでスナップショットを渡します。
    """
    def __init__(self, scale: int = 10, foreground: str = "#33FF66", background: str = "#101010", parent=None):
        super().__init__(parent)
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._frame: Optional[PixelRows] = None
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        self.setFixedSize(self.sizeHint())

    def sizeHint(self) -> QSize:
        return QSize(WIDTH * self._scale, HEIGHT * self._scale)

    def set_scale(self, scale: int) -> None:
        self._scale = scale
        self.setFixedSize(self.sizeHint())
        self.update()

    def set_colors(self, foreground: str, background: str) -> None:
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self.update()

    # @intent:responsibility 新しいスナップショットを受け取り、再描画を要求します。
    def update_frame(self, frame: PixelRows) -> None:
        self._frame = frame
        self.update()

    def lit_pixel_count(self) -> int:
        if self._frame is None:
            return 0
        return sum(sum(row) for row in self._frame)

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        if self._frame is not None:
            s = self._scale
            for y, row in enumerate(self._frame):
                for x, pixel in enumerate(row):
                    if pixel:
                        painter.fillRect(x * s, y * s, s, s, self._foreground)
        painter.end()
