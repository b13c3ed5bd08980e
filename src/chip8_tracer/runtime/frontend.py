# chip8_tracer/runtime/frontend.py
"""
描画・音声・入力を担う外部協調者とのインターフェース。

駆動ループ（Driver）はこのインターフェースのみを介して画面・スピーカー・入力装置と
やり取りし、具体的な実装（Qtウィンドウ、ヘッドレス）には依存しません。
"""
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, List, Optional

from chip8_tracer.common.types import Frame


# @intent:responsibility 利用者の操作の種類を定義します。
class UserActionKind(Enum):
    QUIT = "QUIT"
    KEY_DOWN = "KEY_DOWN"
    KEY_UP = "KEY_UP"


# @intent:responsibility 利用者の操作1件を表します。key はChip-8のキー番号(0x0-0xF)です。
@dataclass(frozen=True)
class UserAction:
    kind: UserActionKind
    key: Optional[int] = None

    @classmethod
    def quit(cls) -> "UserAction":
        return cls(UserActionKind.QUIT)

    @classmethod
    def key_down(cls, key: int) -> "UserAction":
        return cls(UserActionKind.KEY_DOWN, key)

    @classmethod
    def key_up(cls, key: int) -> "UserAction":
        return cls(UserActionKind.KEY_UP, key)


# @intent:responsibility 駆動ループから見たフロントエンドの抽象インターフェースです。
class Frontend(ABC):
    # @intent:responsibility フレームを画面に反映します。
    @abstractmethod
    def render(self, frame: Frame) -> None:
        pass

    # @intent:responsibility 前回の呼び出し以降に発生した利用者操作を返します。
    @abstractmethod
    def poll_events(self) -> List[UserAction]:
        pass

    @abstractmethod
    def play_sound(self) -> None:
        pass

    @abstractmethod
    def stop_sound(self) -> None:
        pass

    @abstractmethod
    def is_playing(self) -> bool:
        pass


# @intent:responsibility 画面や音声を持たないフロントエンド。テストやCLIのヘッドレス実行に使用します。
class HeadlessFrontend(Frontend):
    """
    描画されたフレームと発音回数を記録し、キューに積まれた操作を順に返します。
    """
    def __init__(self, actions: Iterable[UserAction] = ()):
        self._actions: Deque[UserAction] = deque(actions)
        self.frames: List[Frame] = []
        self.sound_starts = 0
        self._playing = False

    def queue(self, action: UserAction) -> None:
        self._actions.append(action)

    def render(self, frame: Frame) -> None:
        self.frames.append(frame)

    def poll_events(self) -> List[UserAction]:
        actions = list(self._actions)
        self._actions.clear()
        return actions

    def play_sound(self) -> None:
        self._playing = True
        self.sound_starts += 1

    def stop_sound(self) -> None:
        self._playing = False

    def is_playing(self) -> bool:
        return self._playing

    @property
    def last_frame(self) -> Optional[Frame]:
        return self.frames[-1] if self.frames else None
