# chip8_tracer/runtime/driver.py
"""
駆動ループ。

命令クロック（cpu_hz）と60Hzのタイマークロックという2つのクロック領域を、
経過時間の積算によって1つのスレッド上で協調的に駆動します。
"""
import logging
import time
from enum import Enum
from typing import Optional

from chip8_tracer.arch.chip8.cpu import WAIT_MNEMONIC, Chip8Cpu
from chip8_tracer.common.constants import TIMER_HZ
from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.debugger.debugger import Debugger
from chip8_tracer.runtime.frontend import Frontend, UserActionKind

logger = logging.getLogger(__name__)

DEFAULT_CPU_HZ = 700
# 1回の advance で処理する経過時間の上限（秒）。スリープ復帰直後などの暴走を防ぐ。
MAX_ELAPSED = 0.25


# @intent:responsibility 実行中に Chip8Error が発生した場合の扱いを定義します。
class ErrorPolicy(Enum):
    HALT = "halt"   # 実行を停止し、エラーを last_error に保持する
    SKIP = "skip"   # ログを出力し、問題の命令語を読み飛ばして続行する


# @intent:responsibility CPUとフロントエンドを結び付け、2つのクロック領域を駆動します。
class Driver:
    """
    Driver.service(elapsed) を一定間隔で呼び出すことで、CPUを実時間に沿って進めます。
    Qtのタイマーからの協調的な呼び出しと、run() によるブロッキング実行の両方に対応します。
    """
    def __init__(self, cpu: Chip8Cpu, frontend: Frontend, cpu_hz: int = DEFAULT_CPU_HZ,
                 on_error: ErrorPolicy = ErrorPolicy.HALT, debugger: Optional[Debugger] = None):
        if cpu_hz <= 0:
            raise ValueError("cpu_hz must be positive.")
        self._cpu = cpu
        self._frontend = frontend
        self._cpu_hz = cpu_hz
        self._on_error = on_error
        self._debugger = debugger
        self._cpu_acc = 0.0
        self._timer_acc = 0.0
        self._rendered_version: Optional[int] = None
        self._running = True
        self._paused = False
        self.last_error: Optional[Chip8Error] = None
        self.instructions_executed = 0
        self.timer_ticks = 0

    @property
    def cpu_hz(self) -> int:
        return self._cpu_hz

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False
        self.last_error = None

    def stop(self) -> None:
        self._running = False

    # @intent:responsibility フロントエンドから受け取った操作をCPUへ反映します。
    def _apply_actions(self) -> None:
        for action in self._frontend.poll_events():
            if action.kind is UserActionKind.QUIT:
                logger.info("Quit requested")
                self._running = False
            elif action.kind is UserActionKind.KEY_DOWN and action.key is not None:
                self._cpu.press_key(action.key)
            elif action.kind is UserActionKind.KEY_UP and action.key is not None:
                self._cpu.release_key(action.key)

    # @intent:responsibility 1命令を実行し、エラーポリシーとブレークポイントを適用します。
    # @intent:return 命令を続けて実行してよい場合は True。
    def _execute_one(self) -> bool:
        try:
            if self._debugger is not None:
                snapshot = self._debugger.step_instruction()
            else:
                snapshot = self._cpu.execute_one_instruction()
        except Chip8Error as e:
            if self._on_error is ErrorPolicy.SKIP:
                logger.warning("%s; skipping", e)
                self._cpu.skip_instruction()
                return True
            logger.error("Halting: %s", e)
            self.last_error = e
            self._paused = True
            return False

        if snapshot.operation.mnemonic == WAIT_MNEMONIC:
            # キー入力待ち。このフレームの残りの命令は実行しても進まない
            return False
        self.instructions_executed += 1
        if self._debugger is not None and self._debugger.should_break(snapshot):
            logger.info("Breakpoint hit at %04X", snapshot.state.pc)
            self._paused = True
            return False
        return True

    # @intent:responsibility 経過時間に応じた数の命令とタイマー刻みを実行します。
    # @intent:rationale 端数は次回に持ち越すため、呼び出し間隔が揺らいでも長期的な実行速度は一定です。
    def advance(self, elapsed: float) -> None:
        if elapsed < 0:
            raise ValueError("elapsed must not be negative.")
        elapsed = min(elapsed, MAX_ELAPSED)

        self._timer_acc += elapsed
        ticks = int(self._timer_acc * TIMER_HZ)
        self._timer_acc -= ticks / TIMER_HZ
        for _ in range(ticks):
            self._cpu.tick_timers()
        self.timer_ticks += ticks

        if self._paused:
            self._cpu_acc = 0.0
            return

        self._cpu_acc += elapsed
        count = int(self._cpu_acc * self._cpu_hz)
        self._cpu_acc -= count / self._cpu_hz
        for _ in range(count):
            if not self._execute_one():
                break

    # @intent:responsibility 発音状態をサウンドタイマーに追従させます。
    def _update_sound(self) -> None:
        active = self._cpu.is_sound_active()
        if active and not self._frontend.is_playing():
            self._frontend.play_sound()
        elif not active and self._frontend.is_playing():
            self._frontend.stop_sound()

    def _render_if_changed(self) -> None:
        version = self._cpu.get_display().version
        if version != self._rendered_version:
            self._frontend.render(self._cpu.get_frame())
            self._rendered_version = version

    # @intent:responsibility 駆動の1周期分（入力反映→実行→音声→描画）を行います。
    def service(self, elapsed: float) -> None:
        self._apply_actions()
        if not self._running:
            return
        self.advance(elapsed)
        self._update_sound()
        self._render_if_changed()

    # @intent:responsibility 終了要求、停止、または制限時間までブロッキングで実行します。
    def run(self, max_seconds: Optional[float] = None, frame_interval: float = 1.0 / TIMER_HZ) -> None:
        start = time.perf_counter()
        last = start
        while self._running:
            now = time.perf_counter()
            self.service(now - last)
            last = now
            if self.last_error is not None:
                break
            if max_seconds is not None and now - start >= max_seconds:
                break
            time.sleep(frame_interval)
        self._frontend.stop_sound()
