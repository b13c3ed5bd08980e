# src/chip8_tracer/ui/qt_frontend.py
"""
Qtウィジェットを駆動ループのフロントエンドとして接続するアダプタ。
"""
from collections import deque
from typing import Deque, Dict, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence
from PySide6.QtWidgets import QApplication

from chip8_tracer.common.types import Frame
from chip8_tracer.runtime.frontend import Frontend, UserAction
from chip8_tracer.ui.display_view import DisplayView

# @intent:responsibility Qtのキーコードを設定ファイルで使うキー名（"X", "Space", "1" など）に変換します。
def key_name(qt_key: int) -> str:
    return QKeySequence(qt_key).toString()

# @intent:responsibility DisplayViewへの描画、ビープ音、キー入力のキューイングを担います。
class QtFrontend(Frontend):
    """
    キーイベントは MainWindow から handle_key_press/handle_key_release で渡され、
    キー対応表でChip-8のキー番号に変換されてから駆動ループに渡されます。
    """
    def __init__(self, display_view: DisplayView, key_map: Dict[str, int]):
        self._display_view = display_view
        self._key_map = {name.upper(): key for name, key in key_map.items()}
        self._actions: Deque[UserAction] = deque()
        self._playing = False

    # @intent:responsibility Qtのキーに対応するChip-8のキー番号を返します。対応が無ければ None。
    def map_key(self, qt_key: int) -> Optional[int]:
        return self._key_map.get(key_name(qt_key).upper())

    # @intent:return イベントを処理した場合は True。
    def handle_key_press(self, qt_key: int) -> bool:
        if qt_key == Qt.Key_Escape:
            self._actions.append(UserAction.quit())
            return True
        key = self.map_key(qt_key)
        if key is None:
            return False
        self._actions.append(UserAction.key_down(key))
        return True

    def handle_key_release(self, qt_key: int) -> bool:
        key = self.map_key(qt_key)
        if key is None:
            return False
        self._actions.append(UserAction.key_up(key))
        return True

    def render(self, frame: Frame) -> None:
        self._display_view.set_frame(frame)

    def poll_events(self) -> List[UserAction]:
        actions = list(self._actions)
        self._actions.clear()
        return actions

    # @intent:rationale Qtには持続音を鳴らす標準APIが無いため、サウンドタイマーの立ち上がりでビープを1回鳴らします。
    def play_sound(self) -> None:
        self._playing = True
        QApplication.beep()

    def stop_sound(self) -> None:
        self._playing = False

    def is_playing(self) -> bool:
        return self._playing
