# src/chip8_tracer/ui/stack_view.py
"""
コールスタック（戻りアドレス）の内容を表示するウィジェット。
"""
from typing import List

from PySide6.QtWidgets import QWidget, QVBoxLayout, QPlainTextEdit
from PySide6.QtGui import QTextOption

from chip8_tracer.common.constants import STACK_DEPTH
from chip8_tracer.ui.theme import COLOR_BG, COLOR_TEXT, get_monospace_font

# @intent:responsibility コールスタックを深さ順に可視化するUIウィジェットを提供します。
class StackView(QWidget):
    """
    16段のスタックを、底(00)から順に表示します。積まれていない段は "----" になります。
    最上段（次のRETで戻る先）には "<- SP" の印を付けます。
    """
    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)
        self.editor = QPlainTextEdit(self)
        self.editor.setFont(get_monospace_font(10))
        self.editor.setReadOnly(True)
        self.editor.setWordWrapMode(QTextOption.NoWrap)
        self.editor.setStyleSheet(f"background-color: {COLOR_BG}; color: {COLOR_TEXT};")
        self.layout.addWidget(self.editor)

    @staticmethod
    def format_stack(stack: List[int]) -> List[str]:
        lines = []
        for depth in range(STACK_DEPTH):
            if depth < len(stack):
                marker = "  <- SP" if depth == len(stack) - 1 else ""
                lines.append(f"{depth:02X}: {stack[depth]:04X}{marker}")
            else:
                lines.append(f"{depth:02X}: ----")
        return lines

    # @intent:responsibility スタックの内容で表示を更新します。
    def update_stack(self, stack: List[int]) -> None:
        self.editor.setPlainText("\n".join(self.format_stack(stack)))
