"""
UIの配色とフォントを管理するモジュール。

クロスプラットフォーム（Windows/Mac/Linux）で最適な等幅フォントを選択し、
アプリケーション全体にダークテーマを適用します。
"""
from PySide6.QtGui import QColor, QFont, QFontDatabase, QPalette
from PySide6.QtWidgets import QApplication

COLOR_BG = "#101010"
COLOR_TEXT = "#BBBBBB"
COLOR_HIGHLIGHT = "#404000"  # Dark Yellow
COLOR_VALUE = "#FFD700"      # Gold

# @intent:responsibility 現在のシステムで利用可能な最適な等幅フォントファミリー名を返します。
def get_monospace_font_family() -> str:
    """
    優先順位: Consolas -> Menlo -> Monaco -> Courier New -> システムの等幅フォント
    """
    available_families = QFontDatabase.families()
    for font in ["Consolas", "Menlo", "Monaco", "Courier New"]:
        if font in available_families:
            return font
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

def get_monospace_font(size: int = 10) -> QFont:
    return QFont(get_monospace_font_family(), size)

# @intent:responsibility 設定ファイルの色指定（"#RRGGBB" や色名）をQColorに変換します。
def parse_color(value: str, fallback: str) -> QColor:
    color = QColor(value)
    if not color.isValid():
        return QColor(fallback)
    return color

# @intent:responsibility アプリケーションにダークテーマのパレットを適用します。
def apply_dark_palette() -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor(29, 29, 29))
    palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
    palette.setColor(QPalette.Base, QColor(30, 30, 30))
    palette.setColor(QPalette.AlternateBase, QColor(53, 53, 53))
    palette.setColor(QPalette.Text, QColor(224, 224, 224))
    palette.setColor(QPalette.Button, QColor(53, 53, 53))
    palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
    palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
    palette.setColor(QPalette.HighlightedText, QColor(0, 0, 0))
    QApplication.setPalette(palette)
