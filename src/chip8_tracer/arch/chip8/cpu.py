# src/chip8_tracer/arch/chip8/cpu.py
"""
Chip-8 CPUエミュレーションの中心モジュール。

CPUはマシン集合体（メモリ、表示、キーパッド、タイマー、乱数源）を所有し、
外部の駆動ループに対して命令実行・タイマー・入力・表示の入口を提供します。
"""
import logging
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from chip8_tracer.arch.chip8 import disassembler
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_tracer.arch.chip8.instructions.base import Chip8Operation
from chip8_tracer.arch.chip8.machine import Chip8Machine, default_random_source
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.common.constants import INSTRUCTION_LENGTH
from chip8_tracer.common.types import Frame, RandomSource, RegisterInfo, RegisterLayoutInfo
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import DeviceState, Metadata, Snapshot
from chip8_tracer.devices.display import DisplayBuffer
from chip8_tracer.transport.memory import Memory

logger = logging.getLogger(__name__)

# @intent:constant キー入力待ち中のステップが返すスナップショットのニーモニック。
WAIT_MNEMONIC = "WAIT"

# @intent:responsibility Chip-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    Chip-8 CPUをエミュレートするクラス。
    """
    # @intent:responsibility Chip8Cpuとマシン集合体を初期化します。
    # @intent:pre-condition random_source は呼び出すたびに0〜255の値を返す関数です。
    def __init__(self, memory: Optional[Memory] = None, random_source: Optional[RandomSource] = None):
        if memory is None:
            memory = Memory()
        if random_source is None:
            random_source = default_random_source()
        self._machine = Chip8Machine(memory=memory, random_byte=random_source)
        super().__init__(memory)

    # @intent:responsibility Chip-8の初期状態（PC=0x200）を生成します。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility レジスタとデバイスをリセットします。メモリ上のプログラムとフォントは保持されます。
    def reset(self) -> None:
        super().reset()
        self._machine.display.clear()
        self._machine.keypad.reset()
        self._machine.timers.reset()

    def get_machine(self) -> Chip8Machine:
        return self._machine

    # @intent:responsibility メモリから次の命令語（ビッグエンディアン16bit）をフェッチします。
    def _fetch(self) -> int:
        return self._memory.read_word(self._state.pc)

    # @intent:responsibility 命令語をデコードし、Operationオブジェクトを返します。
    def _decode(self, opcode: int) -> Chip8Operation:
        return decode_opcode(opcode, self._state.pc)

    # @intent:responsibility Operationを実行し、状態を更新します。
    def _execute(self, operation: Chip8Operation) -> None:
        execute_instruction(operation, self._state, self._machine)

    # @intent:responsibility キー入力待ち中の実行要求を処理します。
    # @intent:return 待ち中であれば WAIT スナップショット、押下エッジを捕捉済みなら待ち完了のスナップショット。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        keypad = self._machine.keypad
        if not keypad.is_waiting:
            return None

        result = keypad.poll_wait()
        if result is None:
            register = keypad.target_register
            operation = Chip8Operation(
                opcode_hex=f"F{register:X}0A",
                mnemonic=WAIT_MNEMONIC,
                operands=[f"V{register:X}", "K"],
                cycle_count=0,
                length=0,
            )
            return Snapshot(
                state=self._state.copy(),
                operation=operation,
                metadata=Metadata(cycle_count=self._cycle_count,
                                  disassembly=f"{current_pc:04X}: {WAIT_MNEMONIC} V{register:X}, K"),
                bus_activity=[],
                devices=self._capture_devices(),
            )

        register, key = result
        self._state.v[register] = key
        self._state.pc = (current_pc + INSTRUCTION_LENGTH) & 0xFFFF
        # LD Vx, K 自体は待ち開始時に1命令として計上済み
        operation = replace(decode_opcode(0xF00A | (register << 8), current_pc), cycle_count=0)
        return self._create_snapshot(current_pc, operation)

    # @intent:responsibility スナップショットに含めるデバイス状態を取得します。
    def _capture_devices(self) -> DeviceState:
        timers = self._machine.timers
        return DeviceState(
            delay_timer=timers.get_delay(),
            sound_timer=timers.get_sound(),
            frame_rows=self._machine.display.get_rows(),
            awaiting_register=self._machine.keypad.target_register,
        )

    # @intent:responsibility 外部駆動ループ向けに1命令を実行します。step()の別名です。
    def execute_one_instruction(self) -> Snapshot:
        return self.step()

    # @intent:responsibility 現在の命令語を実行せずに読み飛ばします。
    # @intent:rationale 駆動ループのエラーポリシー "skip" で、不正な命令語の後から実行を再開するために使用します。
    def skip_instruction(self) -> None:
        self._memory.get_and_clear_activity_log()
        logger.warning("Skipping instruction at %04X", self._state.pc)
        self._state.pc = (self._state.pc + INSTRUCTION_LENGTH) & 0xFFFF

    # --- Timers ---
    # @intent:responsibility 60Hzのタイマー刻みを1回分進めます。命令実行とは独立して呼び出されます。
    def tick_timers(self) -> None:
        self._machine.timers.tick()

    def set_delay(self, value: int) -> None:
        self._machine.timers.set_delay(value)

    def get_delay(self) -> int:
        return self._machine.timers.get_delay()

    def set_sound(self, value: int) -> None:
        self._machine.timers.set_sound(value)

    def get_sound(self) -> int:
        return self._machine.timers.get_sound()

    def is_sound_active(self) -> bool:
        return self._machine.timers.is_sound_active()

    # --- Keypad ---
    def press_key(self, key: int) -> None:
        self._machine.keypad.press(key)

    def release_key(self, key: int) -> None:
        self._machine.keypad.release(key)

    def is_key_pressed(self, key: int) -> bool:
        return self._machine.keypad.is_pressed(key)

    def is_awaiting_key(self) -> bool:
        return self._machine.keypad.is_waiting

    # --- Program / Display ---
    # @intent:responsibility プログラムをロードし、CPUを初期状態に戻します。
    def load_program(self, program: bytes) -> None:
        self._memory.load_program(program)
        self.reset()
        logger.info("Loaded program of %d bytes", len(program))

    def get_display(self) -> DisplayBuffer:
        return self._machine.display

    def get_frame(self) -> Frame:
        return self._machine.display.snapshot()

    # @intent:responsibility スナップショットの時点までCPUとデバイスの状態を戻します（デバッガのステップバック用）。
    # @intent:pre-condition メモリの書き戻しは呼び出し側（Debugger）が行います。
    def restore_snapshot(self, snapshot: Snapshot) -> None:
        self.restore_point(snapshot.state, snapshot.devices, snapshot.metadata.cycle_count)

    def restore_point(self, state: Chip8CpuState, devices: Optional[DeviceState], cycle_count: int) -> None:
        self.restore_state(state)
        self._cycle_count = cycle_count
        if devices is None:
            return
        self._machine.timers.set_delay(devices.delay_timer)
        self._machine.timers.set_sound(devices.sound_timer)
        if devices.frame_rows:
            self._machine.display.restore_rows(devices.frame_rows)
        self._machine.keypad.restore_wait(devices.awaiting_register)

    # @intent:responsibility 現在のデバイス状態を保存します。初期状態へのステップバックに使用します。
    def capture_devices(self) -> DeviceState:
        return self._capture_devices()

    # @intent:responsibility レジスタファイルをテキスト形式で出力します（ログ・コンソール表示用）。
    def dump(self) -> str:
        s = self._state
        header = "     " + "  ".join(f"{n:x}" for n in range(16))
        values = " ".join(f"{v:02x}" for v in s.v)
        return "\n".join([
            f"Counter: {self._cycle_count:04x}",
            f"PC: {s.pc:04x} SP: {s.sp:04x} I: {s.i:04x}",
            f"DT: {self.get_delay():02x}   ST: {self.get_sound():02x}",
            "",
            header,
            "  ," + "-" * 49 + ",",
            f"V | {values} |",
            "  `" + "-" * 49 + "'",
        ])

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{n:X}": value for n, value in enumerate(s.v)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp,
            "DT": self.get_delay(), "ST": self.get_sound(),
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(16)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._memory, start_addr, length)
