# src/chip8_tracer/ui/app.py
"""
Qtアプリケーションのエントリポイント。
アプリケーションを初期化し、メインウィンドウを起動します。
"""
import sys
from typing import Optional

from PySide6.QtWidgets import QApplication

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.config.models import SystemConfig
from .main_window import MainWindow

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def run_gui(cpu: Chip8Cpu, config: SystemConfig, autostart: bool = True) -> int:
    """
    メインウィンドウを表示し、イベントループが終了するまでブロックします。
    autostart が真でROMがロードされていれば、起動直後から実行を開始します。
    """
    app = QApplication.instance() or QApplication(sys.argv)
    main_win = MainWindow(cpu, config)
    main_win.show()
    if autostart and config.rom:
        main_win.start()
    return app.exec()
