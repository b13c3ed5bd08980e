# tests/runtime/test_driver.py
"""
chip8_tracer.runtime.driverモジュールの単体テスト。
2つのクロック領域の積算、エラーポリシー、入力・音声・描画の協調を検証します。
"""
import pytest

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.common.errors import StackUnderflow
from chip8_tracer.debugger.debugger import BreakpointCondition, BreakpointConditionType, Debugger
from chip8_tracer.runtime.driver import MAX_ELAPSED, Driver, ErrorPolicy
from chip8_tracer.runtime.frontend import HeadlessFrontend, UserAction

# @intent:test_suite Driverの時間積算と周辺協調者との連携を検証します。

def words(*values):
    program = bytearray()
    for value in values:
        program += bytes([value >> 8, value & 0xFF])
    return bytes(program)

# 0x200: JP #200（無限ループ）
SPIN = words(0x1200)

class TestDriver:
    @pytest.fixture
    def frontend(self):
        return HeadlessFrontend()

    def make_driver(self, program, frontend, **kwargs):
        cpu = Chip8Cpu()
        cpu.load_program(program)
        return Driver(cpu, frontend, **kwargs), cpu

    def test_invalid_cpu_hz(self, frontend):
        with pytest.raises(ValueError):
            Driver(Chip8Cpu(), frontend, cpu_hz=0)

    def test_negative_elapsed_is_rejected(self, frontend):
        driver, _ = self.make_driver(SPIN, frontend)
        with pytest.raises(ValueError):
            driver.advance(-0.1)

    # @intent:test_case_clock_domains 経過時間に比例した命令数とタイマー刻みが実行されることを検証します。
    def test_advance_runs_instructions_and_ticks(self, frontend):
        driver, _ = self.make_driver(SPIN, frontend, cpu_hz=700)
        driver.advance(0.25)
        assert driver.instructions_executed == 175
        assert driver.timer_ticks == 15

    def test_elapsed_is_capped(self, frontend):
        driver, _ = self.make_driver(SPIN, frontend, cpu_hz=700)
        driver.advance(10.0)
        assert driver.instructions_executed == int(MAX_ELAPSED * 700)
        assert driver.timer_ticks == int(MAX_ELAPSED * 60)

    def test_zero_elapsed_does_nothing(self, frontend):
        driver, cpu = self.make_driver(SPIN, frontend)
        driver.advance(0.0)
        assert driver.instructions_executed == 0
        assert cpu.get_cycle_count() == 0

    def test_timers_are_independent_of_cpu_speed(self, frontend):
        # LD V0, #30 / LD DT, V0 / JP #204
        driver, cpu = self.make_driver(words(0x6030, 0xF015, 0x1204), frontend, cpu_hz=700)
        driver.advance(0.25)
        assert cpu.get_delay() == 0x30
        driver.advance(0.25)
        assert cpu.get_delay() == 0x30 - 15

    # @intent:test_case_error_policy_halt haltポリシーではエラーで停止し、PCが進まないことを検証します。
    def test_halt_policy(self, frontend):
        driver, cpu = self.make_driver(words(0x00EE), frontend, on_error=ErrorPolicy.HALT)
        driver.advance(0.25)
        assert isinstance(driver.last_error, StackUnderflow)
        assert driver.paused
        assert driver.instructions_executed == 0
        assert cpu.get_state().pc == 0x200

        driver.resume()
        assert driver.last_error is None
        assert not driver.paused

    # @intent:test_case_error_policy_skip skipポリシーでは不正な命令語を読み飛ばして続行することを検証します。
    def test_skip_policy(self, frontend):
        # 0x200: RET（空スタック） / 0x202: JP #202
        driver, cpu = self.make_driver(words(0x00EE, 0x1202), frontend, on_error=ErrorPolicy.SKIP)
        driver.advance(0.25)
        assert driver.last_error is None
        assert not driver.paused
        assert driver.instructions_executed == 174
        assert cpu.get_state().pc == 0x202

    def test_paused_driver_only_ticks_timers(self, frontend):
        driver, cpu = self.make_driver(SPIN, frontend)
        cpu.set_delay(20)
        driver.pause()
        driver.advance(0.25)
        assert driver.instructions_executed == 0
        assert cpu.get_delay() == 5

    # @intent:test_case_quit QUIT操作で駆動が終了することを検証します。
    def test_quit_action_stops_driver(self):
        frontend = HeadlessFrontend([UserAction.quit()])
        driver, _ = self.make_driver(SPIN, frontend)
        driver.service(0.25)
        assert not driver.running
        assert driver.instructions_executed == 0

    def test_key_actions_reach_keypad(self, frontend):
        driver, cpu = self.make_driver(SPIN, frontend)
        frontend.queue(UserAction.key_down(0x5))
        driver.service(0.0)
        assert cpu.is_key_pressed(0x5)
        frontend.queue(UserAction.key_up(0x5))
        driver.service(0.0)
        assert not cpu.is_key_pressed(0x5)

    # @intent:test_case_key_wait キー入力待ちでバッチが止まり、押下で再開することを検証します。
    def test_key_wait_blocks_until_press(self, frontend):
        # LD V1, K / JP #202
        driver, cpu = self.make_driver(words(0xF10A, 0x1202), frontend)
        driver.service(0.25)
        assert cpu.is_awaiting_key()
        assert driver.instructions_executed == 1
        assert cpu.get_state().pc == 0x200

        driver.service(0.25)
        assert driver.instructions_executed == 1

        frontend.queue(UserAction.key_down(0x7))
        driver.service(0.25)
        assert not cpu.is_awaiting_key()
        assert cpu.get_state().v[1] == 0x7
        assert cpu.get_state().pc == 0x202

    # @intent:test_case_sound サウンドタイマーに従って発音・停止することを検証します。
    def test_sound_follows_sound_timer(self, frontend):
        # LD V0, #10 / LD ST, V0 / JP #204
        driver, _ = self.make_driver(words(0x6010, 0xF018, 0x1204), frontend)
        driver.service(0.25)
        assert frontend.is_playing()
        assert frontend.sound_starts == 1

        driver.service(0.25)   # ST: 16 -> 1
        assert frontend.is_playing()
        driver.service(0.25)   # ST: 1 -> 0
        assert not frontend.is_playing()
        assert frontend.sound_starts == 1

    def test_render_only_when_display_changes(self, frontend):
        # LD I, #050 / DRW V0, V0, 5 / JP #204
        driver, cpu = self.make_driver(words(0xA050, 0xD005, 0x1204), frontend)
        driver.service(0.0)
        assert len(frontend.frames) == 1

        driver.service(0.0)
        assert len(frontend.frames) == 1

        driver.service(0.25)
        assert len(frontend.frames) == 2
        assert frontend.last_frame == cpu.get_frame()
        assert frontend.last_frame[0][0]

    def test_breakpoint_pauses_driver(self, frontend):
        cpu = Chip8Cpu()
        cpu.load_program(words(0x6001, 0x1202))
        debugger = Debugger(cpu)
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x202))
        driver = Driver(cpu, frontend, debugger=debugger)

        driver.advance(0.25)
        assert driver.paused
        assert driver.instructions_executed == 1
        assert len(debugger.get_history()) == 1

    def test_run_returns_on_quit(self):
        frontend = HeadlessFrontend([UserAction.quit()])
        driver, _ = self.make_driver(SPIN, frontend)
        driver.run(max_seconds=5.0)
        assert not driver.running

    def test_run_stops_on_error(self, frontend):
        driver, _ = self.make_driver(words(0x00EE), frontend)
        driver.run(max_seconds=5.0, frame_interval=0.005)
        assert isinstance(driver.last_error, StackUnderflow)

    def test_run_honours_time_limit(self, frontend):
        driver, _ = self.make_driver(SPIN, frontend)
        driver.run(max_seconds=0.05, frame_interval=0.005)
        assert driver.running
        assert driver.instructions_executed > 0
        assert not frontend.is_playing()
