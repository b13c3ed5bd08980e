"""
逆アセンブルコードを表示するウィジェット。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView
from PySide6.QtGui import QColor

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.ui.theme import COLOR_BG, COLOR_HIGHLIGHT, get_monospace_font

# 逆アセンブルする範囲（PCから後ろのバイト数）
DISASSEMBLY_RANGE = 512

# @intent:responsibility 逆アセンブルされたコードを表形式で表示し、現在のPCをハイライトするUIウィジェットを提供します。
class CodeView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Address", "Bytes", "Mnemonic"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)
        self.table.setFont(get_monospace_font(10))
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        self.table.setStyleSheet(f"background-color: {COLOR_BG}; color: #BBBBBB;")
        self.layout.addWidget(self.table)

        self._cpu: Optional[Chip8Cpu] = None
        self.highlighted_row = -1
        # 現在表示している逆アセンブルデータ [(addr, hex, mnemonic), ...]
        self.disassembled_data = []

    def set_cpu(self, cpu: Chip8Cpu) -> None:
        self._cpu = cpu
        self.reset_cache()

    def _row_of(self, pc: int) -> int:
        for i, (addr, _, _) in enumerate(self.disassembled_data):
            if addr == pc:
                return i
        return -1

    # @intent:responsibility 指定されたPC周辺のメモリを逆アセンブルして表示を更新します。
    def update_code(self, pc: int):
        """
        PCが現在の表示範囲内（かつ命令境界上）にあれば、再逆アセンブルせずにハイライト移動のみ行います。
        """
        if not self._cpu:
            return

        row_index = self._row_of(pc)
        if row_index == -1:
            self.disassembled_data = self._cpu.disassemble(pc, DISASSEMBLY_RANGE)
            self.table.setRowCount(len(self.disassembled_data))
            for row, (addr, hex_dump, mnemonic) in enumerate(self.disassembled_data):
                self.table.setItem(row, 0, QTableWidgetItem(f"{addr:04X}"))
                self.table.setItem(row, 1, QTableWidgetItem(hex_dump))
                self.table.setItem(row, 2, QTableWidgetItem(mnemonic))
            row_index = self._row_of(pc)

        highlight = QColor(COLOR_HIGHLIGHT)
        normal = QColor(COLOR_BG)
        for row in range(self.table.rowCount()):
            color = highlight if row == row_index else normal
            for col in range(3):
                self.table.item(row, col).setBackground(color)
        self.highlighted_row = row_index

        if row_index != -1:
            self.table.scrollToItem(self.table.item(row_index, 0), QTableWidget.EnsureVisible)

    # @intent:responsibility 内部キャッシュをクリアし、強制的な再描画を準備します。
    def reset_cache(self):
        """
        メモリ内容が外部で変更された場合（例：新しいROMのロード）に呼び出してください。
        """
        self.disassembled_data = []
        self.highlighted_row = -1
        self.table.setRowCount(0)
