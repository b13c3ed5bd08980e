# src/chip8_tracer/arch/chip8/state.py
"""
Chip-8 CPU固有の状態定義（レジスタファイル）。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.common.constants import FLAG_REGISTER, PROGRAM_START, REGISTER_COUNT, STACK_DEPTH
from chip8_tracer.common.errors import StackOverflow, StackUnderflow
from chip8_tracer.core.state import CpuState

# @intent:responsibility Chip-8 CPUの全てのレジスタ（V0-VF, I, PC）とコールスタックを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    Chip-8 CPUのレジスタ状態を保持するデータクラス。
    sp はスタックに積まれている戻りアドレスの数を表します。
    """
    pc: int = PROGRAM_START
    i: int = 0x0000    # Index Register (16bit, 下位12bitのみアドレスとして有効)
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    stack: List[int] = field(default_factory=list)

    # @intent:accessor VFはフラグ出力を兼ねるため、専用のプロパティを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility 戻りアドレスをスタックに積みます。
    # @intent:post-condition 満杯の場合はStackOverflowを送出し、スタックは変化しません。
    def push(self, address: int, target: int) -> None:
        if len(self.stack) >= STACK_DEPTH:
            raise StackOverflow(target, len(self.stack))
        self.stack.append(address)
        self.sp = len(self.stack)

    # @intent:responsibility スタックから戻りアドレスを取り出します。
    def pop(self) -> int:
        if not self.stack:
            raise StackUnderflow()
        address = self.stack.pop()
        self.sp = len(self.stack)
        return address

    # @intent:responsibility 名前（"V0"〜"VF", "I", "PC", "SP"）でレジスタ値を取得します。
    # @intent:rationale デバッガのブレークポイントがレジスタを名前で指定するため。
    def get_register(self, name: str) -> int:
        key = name.upper()
        if key == "PC":
            return self.pc
        if key == "SP":
            return self.sp
        if key == "I":
            return self.i
        if len(key) == 2 and key[0] == "V":
            try:
                return self.v[int(key[1], 16)]
            except ValueError:
                pass
        raise KeyError(f"Unknown register '{name}'.")

    def copy(self) -> "Chip8CpuState":
        return Chip8CpuState(pc=self.pc, sp=self.sp, i=self.i, v=list(self.v), stack=list(self.stack))
