# chip8_tracer/devices/timers.py
"""
遅延タイマーとサウンドタイマー。

どちらも8bitのカウンタで、外部スケジューラが60Hzで呼び出す tick() ごとに1ずつ減算されます。
命令の実行速度とは完全に独立しています。
"""


def _check_byte(value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Timer value {value} is not an 8-bit value.")
    return value


# @intent:responsibility 2つのカウントダウンタイマーを保持し、60Hzの減算を行います。
class Timers:
    """
    遅延(DT)とサウンド(ST)の2つのタイマー。
    0で下げ止まり、アンダーフローやラップアラウンドは起きません。
    """
    def __init__(self):
        self._delay = 0
        self._sound = 0

    def reset(self) -> None:
        self._delay = 0
        self._sound = 0

    # @intent:responsibility 両タイマーを1ずつ減算します（0で停止）。
    def tick(self) -> None:
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1

    def get_delay(self) -> int:
        return self._delay

    def set_delay(self, value: int) -> None:
        self._delay = _check_byte(value)

    def get_sound(self) -> int:
        return self._sound

    def set_sound(self, value: int) -> None:
        self._sound = _check_byte(value)

    # @intent:responsibility オーディオ協調者向けに「発音中」かどうかを返します。
    def is_sound_active(self) -> bool:
        return self._sound > 0
