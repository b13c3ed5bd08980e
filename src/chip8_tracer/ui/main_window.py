# src/chip8_tracer/ui/main_window.py
"""
メインウィンドウの実装。
表示画面と、コード・レジスタ・スタックのインスペクタを保持し、実行制御を行います。
"""
import logging
import os
import time
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QDockWidget, QTabWidget, QToolBar, QFileDialog, QMessageBox
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.debugger.debugger import Debugger
from chip8_tracer.loader.loader import get_loader
from .code_view import CodeView
from .display_view import DisplayView
from .qt_frontend import QtFrontend
from .register_view import RegisterView
from .stack_view import StackView
from .theme import apply_dark_palette, get_monospace_font_family

logger = logging.getLogger(__name__)

# 駆動ループを呼び出す間隔（ミリ秒）
SERVICE_INTERVAL_MS = 16
# 実行中にインスペクタを更新する間隔（駆動ループの呼び出し回数）
INSPECTOR_REFRESH_TICKS = 6

# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    def __init__(self, cpu: Chip8Cpu, config: Optional[SystemConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("Chip-8 Tracer")
        self._config = config or SystemConfig()
        self.cpu = cpu
        builder = SystemBuilder()
        self.debugger = builder.build_debugger(cpu, self._config)

        display = self._config.display
        self.display_view = DisplayView(display.scale, display.foreground, display.background)
        self.setCentralWidget(self.display_view)
        self.frontend = QtFrontend(self.display_view, self._config.key_map)
        self.driver = builder.build_driver(cpu, self.frontend, self._config, debugger=self.debugger)

        self._set_dark_theme()
        self._create_toolbar()
        self._create_menus()
        self._create_status_inspector()

        self._timer = QTimer(self)
        self._timer.setInterval(SERVICE_INTERVAL_MS)
        self._timer.timeout.connect(self._service)
        self._last_service = time.perf_counter()
        self._ticks = 0

        self.display_view.set_frame(cpu.get_frame())
        self._refresh_inspectors()
        self._update_ui_state(False)

    # @intent:responsibility メニューバーを作成し、ROMロードアクションを追加します。
    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")
        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._load_rom_file)
        file_menu.addAction(self.load_rom_action)

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        toolbar.setFocusPolicy(Qt.NoFocus)
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.triggered.connect(self.stop)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self.step)
        toolbar.addAction(self.step_action)

        self.step_back_action = QAction("Step Back", self)
        self.step_back_action.triggered.connect(self.step_back)
        toolbar.addAction(self.step_back_action)

    # @intent:responsibility 右側のステータスインスペクタを作成します。
    def _create_status_inspector(self):
        status_dock = QDockWidget("Status Inspector", self)
        status_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        tab_widget = QTabWidget()
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.cpu)
        tab_widget.addTab(self.register_view, "Registers")
        self.code_view = CodeView()
        self.code_view.set_cpu(self.cpu)
        tab_widget.addTab(self.code_view, "Assembler")
        self.stack_view = StackView()
        tab_widget.addTab(self.stack_view, "Stack")
        status_dock.setWidget(tab_widget)
        self.addDockWidget(Qt.RightDockWidgetArea, status_dock)

    def _set_dark_theme(self):
        apply_dark_palette()
        self.setStyleSheet(f"""
            QWidget {{ font-family: '{get_monospace_font_family()}', monospace; font-size: 10pt; }}
            QMainWindow, QToolBar {{ background-color: #1D1D1D; border: none; }}
            QDockWidget::title {{ text-align: left; background: #101010; padding: 4px; font-weight: bold; }}
            QTabBar::tab {{ background: #1E1E1E; padding: 8px 12px; min-width: 80px; }}
            QTabBar::tab:selected {{ background: #101010; border: 1px solid #2A82DA; }}
        """)

    # @intent:responsibility 実行状態に応じてUIコンポーネントの有効/無効を切り替えます。
    def _update_ui_state(self, is_running: bool):
        self.load_rom_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.step_back_action.setEnabled(not is_running)
        self.stop_action.setEnabled(is_running)

    def _refresh_inspectors(self):
        state = self.cpu.get_state()
        self.register_view.update_registers()
        self.code_view.update_code(state.pc)
        self.stack_view.update_stack(state.stack)

    def is_running(self) -> bool:
        return self._timer.isActive()

    # @intent:responsibility 駆動ループによる連続実行を開始します。
    @Slot()
    def start(self):
        self.driver.resume()
        self._last_service = time.perf_counter()
        self._timer.start()
        self._update_ui_state(True)
        self.statusBar().showMessage("Running...")

    @Slot()
    def stop(self):
        self._timer.stop()
        self.driver.pause()
        self.frontend.stop_sound()
        self._update_ui_state(False)
        self._refresh_inspectors()
        self.statusBar().showMessage("Stopped")

    # @intent:responsibility QTimerから呼ばれ、経過時間分だけ駆動ループを進めます。
    @Slot()
    def _service(self):
        now = time.perf_counter()
        self.driver.service(now - self._last_service)
        self._last_service = now

        if not self.driver.running:
            self.close()
            return
        if self.driver.paused:
            self.stop()
            if self.driver.last_error is not None:
                self.statusBar().showMessage(f"Halted: {self.driver.last_error}")
            return

        self._ticks += 1
        if self._ticks % INSPECTOR_REFRESH_TICKS == 0:
            self._refresh_inspectors()

    # @intent:responsibility デバッガを1ステップ実行します。
    @Slot()
    def step(self):
        try:
            snapshot = self.debugger.step_instruction()
        except Chip8Error as e:
            self.statusBar().showMessage(f"Error: {e}")
            return
        self.display_view.set_frame(self.cpu.get_frame())
        self._refresh_inspectors()
        self.statusBar().showMessage(snapshot.metadata.disassembly or "")

    @Slot()
    def step_back(self):
        snapshot = self.debugger.step_back()
        self.display_view.set_frame(self.cpu.get_frame())
        self._refresh_inspectors()
        self.statusBar().showMessage(snapshot.metadata.disassembly if snapshot else "Reached start of history.")

    # @intent:responsibility ROMファイルを選択してロードします。拡張子 .hex/.txt は16進リスティングとして扱います。
    @Slot()
    def _load_rom_file(self):
        file_name, _ = QFileDialog.getOpenFileName(
            self, "Open ROM", "", "Chip-8 ROMs (*.ch8 *.c8 *.rom);;Hex Listings (*.hex *.txt);;All Files (*)")
        if file_name:
            self.load_rom(file_name)

    def load_rom(self, file_name: str) -> bool:
        rom_format = "hex" if os.path.splitext(file_name)[1].lower() in (".hex", ".txt") else "binary"
        try:
            get_loader(rom_format).load(file_name, self.cpu)
        except (OSError, ValueError, Chip8Error) as e:
            logger.error("Failed to load ROM %s: %s", file_name, e)
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")
            return False
        self.debugger.clear_history()
        self.code_view.reset_cache()
        self.display_view.set_frame(self.cpu.get_frame())
        self._refresh_inspectors()
        self.statusBar().showMessage(f"Loaded {file_name}")
        return True

    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.frontend.handle_key_press(event.key()):
            super().keyPressEvent(event)
            return
        if not self.is_running():
            # 停止中でも入力は反映し、Escapeによる終了も受け付ける
            self.driver.service(0.0)
            if not self.driver.running:
                self.close()

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.frontend.handle_key_release(event.key()):
            super().keyReleaseEvent(event)
            return
        if not self.is_running():
            self.driver.service(0.0)

    def closeEvent(self, event: QCloseEvent):
        self._timer.stop()
        self.driver.stop()
        event.accept()
