# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
表示ウィジェット、キー入力、フレームタイマを束ね、FrameRunnerをQtのイベントループから駆動します。
"""
import logging
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QApplication, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from retro_chip8.common.errors import Chip8Error
from retro_chip8.common.types import RunState
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig
from retro_chip8.runner.runner import FrameRunner
from .display_view import DisplayView
from .keymap import map_key
from .fonts import get_monospace_font_family

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Retro CHIP-8"

# @intent:responsibility アプリケーションのメインウィンドウを定義し、ホストループとUI部品を接続します。
class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウクラス。

    ESC: 終了 / SPACE: 一時停止の切り替え / F5: リセット
    """
    def __init__(self, config: Optional[SystemConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or SystemConfig()
        self._builder = SystemBuilder()
        self.runner: Optional[FrameRunner] = None

        self.display_view = DisplayView(self._config.display, self)
        self.setCentralWidget(self.display_view)
        self.status_label = QLabel("No ROM loaded", self)
        self.status_label.setStyleSheet(f"font-family: '{get_monospace_font_family()}', monospace;")
        self.statusBar().addWidget(self.status_label)
        self.setWindowTitle(WINDOW_TITLE)

        self._set_dark_theme()
        self._create_menus()

        self._frame_timer = QTimer(self)
        self._frame_timer.setTimerType(Qt.PreciseTimer)
        self._frame_timer.timeout.connect(self._on_frame)

    # @intent:responsibility メニューバーを作成し、ROMのロードとリセット操作を追加します。
    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.load_config_action = QAction("Load System Config...", self)
        self.load_config_action.triggered.connect(self._load_system_config)
        file_menu.addAction(self.load_config_action)

        self.open_action = QAction("Open ROM...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._open_rom_dialog)
        file_menu.addAction(self.open_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.setShortcut("F5")
        self.reset_action.triggered.connect(self._reset)
        file_menu.addAction(self.reset_action)

        self.quit_action = QAction("Quit", self)
        self.quit_action.triggered.connect(self.close)
        file_menu.addAction(self.quit_action)

    # @intent:responsibility 構成に基づいてシステムを構築し、ROMをロードして実行を開始します。
    # @intent:post-condition ROMのロードに失敗した場合は Chip8Error を送出し、既存のシステムは保持されます。
    def load_rom(self, path: str) -> None:
        cpu, _ = self._builder.build_system(self._config, rom=path)
        self.runner = FrameRunner(
            cpu,
            instructions_per_tick=self._config.instructions_per_tick,
            renderer=self.display_view,
            audio=self,
        )
        self.display_view.render(cpu.framebuffer)
        self._frame_timer.start(max(1, round(1000 / self._config.timer_hz)))
        self._update_status()
        logger.info("Started %s", path)

    # @intent:responsibility AudioSinkインターフェースの実装。トーン状態をウィンドウタイトルに表示します。
    def set_tone(self, active: bool) -> None:
        self.setWindowTitle(f"{WINDOW_TITLE} - BEEP" if active else WINDOW_TITLE)

    @Slot()
    def _on_frame(self):
        if self.runner is None:
            return
        self.runner.run_frame()
        if self.runner.state == RunState.QUIT:
            self.close()

    @Slot()
    def _open_rom_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            try:
                self.load_rom(file_name)
            except Chip8Error as e:
                QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")

    @Slot()
    def _load_system_config(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open System Config", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if file_name:
            try:
                self.apply_config(ConfigLoader().load_from_file(file_name))
            except Chip8Error as e:
                QMessageBox.critical(self, "Error", f"Failed to load system config: {e}")

    # @intent:responsibility 新しい構成を適用します。実行中のシステムは破棄され、構成にROMが指定されていればロードします。
    def apply_config(self, config: SystemConfig) -> None:
        self._frame_timer.stop()
        if self.runner is not None:
            self.runner.quit()
            self.runner = None
        self._config = config
        self.display_view = DisplayView(config.display, self)
        self.setCentralWidget(self.display_view)
        self._update_status()
        if config.rom_path:
            self.load_rom(config.rom_path)

    @Slot()
    def _reset(self):
        if self.runner is not None:
            self.runner.reset()
            self.display_view.render(self.runner.cpu.framebuffer)
            self._update_status()

    def _update_status(self):
        if self.runner is None:
            self.status_label.setText("No ROM loaded")
            return
        cpu = self.runner.cpu
        self.status_label.setText(
            f"{self.runner.state.value}  {cpu.mode.value}  {self.runner.instructions_per_tick} ipt"
        )

    def _set_dark_theme(self):
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(29, 29, 29))
        dark_palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.Text, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        dark_palette.setColor(QPalette.HighlightedText, QColor(0, 0, 0))
        QApplication.setPalette(dark_palette)

    # @intent:responsibility 物理キーを論理キーに変換してキーパッドに反映し、制御キーを処理します。
    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat():
            return
        key = event.key()
        if key == Qt.Key_Escape:
            self.close()
            return
        if self.runner is None:
            super().keyPressEvent(event)
            return
        if key == Qt.Key_Space:
            self.runner.toggle_pause()
            self._update_status()
            return
        logical = map_key(key)
        if logical is not None:
            self.runner.press_key(logical)
        else:
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or self.runner is None:
            return
        logical = map_key(event.key())
        if logical is not None:
            self.runner.release_key(logical)

    # @intent:responsibility ウィンドウが閉じられる際にフレームタイマを止め、実行状態をQUITにします。
    def closeEvent(self, event: QCloseEvent):
        self._frame_timer.stop()
        if self.runner is not None and self.runner.state != RunState.QUIT:
            self.runner.quit()
        event.accept()
