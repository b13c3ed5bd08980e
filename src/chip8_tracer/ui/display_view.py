# src/chip8_tracer/ui/display_view.py
"""
64x32の表示バッファを拡大して描画するウィジェット。
"""
from typing import Optional

from PySide6.QtCore import QRect, QSize
from PySide6.QtGui import QPainter, QPaintEvent
from PySide6.QtWidgets import QWidget

from chip8_tracer.common.constants import DISPLAY_HEIGHT, DISPLAY_WIDTH
from chip8_tracer.common.types import Frame
from chip8_tracer.ui.theme import parse_color

# @intent:responsibility フレームを画素単位の矩形として描画します。
class DisplayView(QWidget):
    """
    描画協調者から渡されたフレームを保持し、paintEventで拡大描画します。
    ウィジェットのサイズが変わった場合は、縦横比を保ったまま最大の整数倍率で描画します。
    """
    def __init__(self, scale: int = 10, foreground: str = "#33FF66", background: str = "#101010", parent=None):
        super().__init__(parent)
        self._scale = scale
        self._foreground = parse_color(foreground, "#33FF66")
        self._background = parse_color(background, "#101010")
        self._frame: Optional[Frame] = None
        self.setMinimumSize(DISPLAY_WIDTH * 2, DISPLAY_HEIGHT * 2)

    def sizeHint(self) -> QSize:
        return QSize(DISPLAY_WIDTH * self._scale, DISPLAY_HEIGHT * self._scale)

    def get_frame(self) -> Optional[Frame]:
        return self._frame

    # @intent:responsibility 新しいフレームを設定し、再描画を要求します。
    def set_frame(self, frame: Frame) -> None:
        self._frame = frame
        self.update()

    # @intent:responsibility 現在のウィジェットサイズに収まる画素の拡大率を返します。
    def pixel_size(self) -> int:
        return max(1, min(self.width() // DISPLAY_WIDTH, self.height() // DISPLAY_HEIGHT))

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        if self._frame is not None:
            size = self.pixel_size()
            offset_x = (self.width() - size * DISPLAY_WIDTH) // 2
            offset_y = (self.height() - size * DISPLAY_HEIGHT) // 2
            for y, row in enumerate(self._frame):
                for x, lit in enumerate(row):
                    if lit:
                        painter.fillRect(QRect(offset_x + x * size, offset_y + y * size, size, size),
                                         self._foreground)
        painter.end()
