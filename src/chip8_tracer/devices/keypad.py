# chip8_tracer/devices/keypad.py
"""
16キーの入力状態と、キー入力待ち（LD Vx, K）の状態機械。

入力協調者は別スレッドから press/release を呼び出す可能性があるため、
キー配列と待ち状態は1つのロックで保護します。
"""
import threading
from enum import Enum
from typing import Optional, Tuple

from chip8_tracer.common.constants import KEY_COUNT


# @intent:responsibility キーパッドの状態機械の状態を定義します。
class KeypadMode(Enum):
    IDLE = "IDLE"                   # 通常の命令実行
    AWAITING_KEY = "AWAITING_KEY"   # LD Vx, K によるキー入力待ち


def _check_key(key: int) -> int:
    if not 0 <= key < KEY_COUNT:
        raise ValueError(f"Key {key} is not in 0x0-0xF.")
    return key


# @intent:responsibility 16個のキーの押下状態とキー入力待ちの状態遷移を管理します。
class Keypad:
    """
    キーの押下状態と AwaitingKey(register) 状態を保持します。
    待ち状態からの遷移は「押下エッジ」（離されていたキーが押された瞬間）のみで発生します。
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._keys = [False] * KEY_COUNT
        self._mode = KeypadMode.IDLE
        self._target_register: Optional[int] = None
        self._captured_key: Optional[int] = None

    def reset(self) -> None:
        with self._lock:
            self._keys = [False] * KEY_COUNT
            self._mode = KeypadMode.IDLE
            self._target_register = None
            self._captured_key = None

    # @intent:responsibility キーの押下を記録します。待ち状態なら最初の押下エッジを捕捉します。
    def press(self, key: int) -> None:
        _check_key(key)
        with self._lock:
            edge = not self._keys[key]
            self._keys[key] = True
            if edge and self._mode is KeypadMode.AWAITING_KEY and self._captured_key is None:
                self._captured_key = key

    def release(self, key: int) -> None:
        _check_key(key)
        with self._lock:
            self._keys[key] = False

    def is_pressed(self, key: int) -> bool:
        return self._keys[_check_key(key)]

    @property
    def mode(self) -> KeypadMode:
        return self._mode

    @property
    def is_waiting(self) -> bool:
        return self._mode is KeypadMode.AWAITING_KEY

    @property
    def target_register(self) -> Optional[int]:
        return self._target_register

    # @intent:responsibility キー入力待ち状態へ遷移します。
    def begin_wait(self, register: int) -> None:
        with self._lock:
            self._mode = KeypadMode.AWAITING_KEY
            self._target_register = register
            self._captured_key = None

    # @intent:responsibility 捕捉済みのキーがあれば待ちを終了し、(レジスタ番号, キー) を返します。
    # @intent:post-condition キーが未捕捉の場合は None を返し、状態は変化しません。
    def poll_wait(self) -> Optional[Tuple[int, int]]:
        with self._lock:
            if self._mode is not KeypadMode.AWAITING_KEY or self._captured_key is None:
                return None
            result = (self._target_register, self._captured_key)
            self._mode = KeypadMode.IDLE
            self._target_register = None
            self._captured_key = None
            return result

    # @intent:responsibility 待ち状態を直接復元します。デバッガのステップバック用。
    def restore_wait(self, register: Optional[int]) -> None:
        with self._lock:
            self._captured_key = None
            if register is None:
                self._mode = KeypadMode.IDLE
                self._target_register = None
            else:
                self._mode = KeypadMode.AWAITING_KEY
                self._target_register = register
