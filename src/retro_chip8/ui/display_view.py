"""
Display View モジュール。

CPUのフレームバッファを拡大表示するウィジェット（Rendererアダプタ）を提供します。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QPainter, QColor

from retro_chip8.common.types import Framebuffer
from retro_chip8.config.models import DisplayConfig

# @intent:utility_function RGBA形式 (0xRRGGBBAA) の整数をQColorに変換します。
def rgba_to_qcolor(value: int) -> QColor:
    return QColor((value >> 24) & 0xFF, (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

# @intent:responsibility フレームバッファを受け取り、scale_factor倍で前景色／背景色を使って描画します。
class DisplayView(QWidget):
    """
    フレームバッファを表示するウィジェット。render() で最新のフレームを受け取ります。
    """
    def __init__(self, config: Optional[DisplayConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or DisplayConfig()
        self._fg = rgba_to_qcolor(self._config.fg_color)
        self._bg = rgba_to_qcolor(self._config.bg_color)
        self._framebuffer: Framebuffer = [[False] * self._config.width for _ in range(self._config.height)]
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(self.sizeHint())

    def sizeHint(self) -> QSize:
        scale = self._config.scale_factor
        return QSize(self._config.width * scale, self._config.height * scale)

    # @intent:responsibility Rendererインターフェースの実装。描画内容をコピーして再描画を要求します。
    def render(self, framebuffer: Framebuffer) -> None:
        self._framebuffer = [list(row) for row in framebuffer]
        self.update()

    def lit_pixel_count(self) -> int:
        return sum(sum(1 for px in row if px) for row in self._framebuffer)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._bg)
        height = len(self._framebuffer)
        width = len(self._framebuffer[0]) if height else 0
        if not width:
            painter.end()
            return

        # ウィンドウサイズに合わせて整数倍で拡大
        scale = max(1, min(self.width() // width, self.height() // height))
        for y, row in enumerate(self._framebuffer):
            for x, lit in enumerate(row):
                if lit:
                    painter.fillRect(x * scale, y * scale, scale, scale, self._fg)
        painter.end()
