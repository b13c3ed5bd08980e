# tests/ui/test_main_window.py
"""
MainWindowの実行制御（ステップ実行、ステップバック、ROMロード）を検証するテスト。
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.ui.main_window import MainWindow

@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app

class TestMainWindow:
    @pytest.fixture
    def window(self, qapp):
        cpu = Chip8Cpu()
        # LD V0, #05 / LD I, #050 / DRW V0, V0, 5 / JP #206
        cpu.load_program(bytes([0x60, 0x05, 0xA0, 0x50, 0xD0, 0x05, 0x12, 0x06]))
        win = MainWindow(cpu, SystemConfig())
        yield win
        win.close()

    def test_initial_ui_state(self, window):
        assert not window.is_running()
        assert window.run_action.isEnabled()
        assert not window.stop_action.isEnabled()
        assert window.code_view.highlighted_row == 0

    # @intent:test_case_step ステップ実行でインスペクタと画面が更新されることを検証します。
    def test_step_and_step_back(self, window):
        for _ in range(3):
            window.step()
        assert window.register_view.get_text("V0") == "0x05"
        assert window.display_view.get_frame() == window.cpu.get_frame()
        assert window.cpu.get_display().lit_pixels()

        window.step_back()
        assert window.cpu.get_state().pc == 0x204
        assert not window.cpu.get_display().lit_pixels()

    def test_start_and_stop(self, window):
        window.start()
        assert window.is_running()
        assert not window.step_action.isEnabled()
        window.stop()
        assert not window.is_running()
        assert window.driver.paused

    def test_load_hex_rom(self, window, tmp_path):
        listing = tmp_path / "prog.hex"
        listing.write_text("6A07\n")
        window.step()
        assert window.load_rom(str(listing))
        assert window.cpu.get_state().pc == 0x200
        assert window.debugger.get_history() == []
        window.step()
        assert window.cpu.get_state().v[0xA] == 0x07

    def test_load_missing_rom(self, window, tmp_path, monkeypatch):
        messages = []
        monkeypatch.setattr("chip8_tracer.ui.main_window.QMessageBox.critical",
                            lambda *args: messages.append(args))
        assert not window.load_rom(str(tmp_path / "missing.ch8"))
        assert len(messages) == 1
