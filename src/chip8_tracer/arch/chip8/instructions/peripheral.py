# src/chip8_tracer/arch/chip8/instructions/peripheral.py
"""
表示バッファとキーパッドを操作する命令の実装。
"""
from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.common.constants import INSTRUCTION_LENGTH
from .base import Chip8Operation, skip_next

# --- CLS ---
def execute_cls(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    machine.display.clear()

# --- DRW ---
# @intent:responsibility I から n バイトのスプライトを (Vx, Vy) にXOR描画し、衝突をVFに設定します。
def execute_drw(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    # 範囲外ならここでMemoryFaultとなり、表示バッファは変化しない
    sprite = machine.memory.read_block(state.i, op.n)
    collision = machine.display.draw_sprite(state.v[op.x], state.v[op.y], sprite)
    state.vf = 1 if collision else 0

# --- SKP / SKNP ---
# @intent:responsibility Vxの下位ニブルが示すキーが押されていれば次の命令をスキップします。
def execute_skp(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    if machine.keypad.is_pressed(state.v[op.x] & 0xF):
        skip_next(state)

# @intent:responsibility Vxの下位ニブルが示すキーが押されていなければ次の命令をスキップします。
def execute_sknp(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    if not machine.keypad.is_pressed(state.v[op.x] & 0xF):
        skip_next(state)

# --- LD Vx, K ---
# @intent:responsibility キーパッドをキー入力待ち状態にし、PCをこの命令自身に戻します。
# @intent:rationale 待ちの完了（Vxへの格納とPCの前進）は、押下エッジの後の次のステップで
#                  Chip8Cpu が行います。スレッドをブロックすることはありません。
def execute_ld_vx_k(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    machine.keypad.begin_wait(op.x)
    state.pc = (state.pc - INSTRUCTION_LENGTH) & 0xFFFF
