# src/chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。

実行時点で state.pc は既に次の命令（命令アドレス+2）を指しています。
"""
from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, skip_next

# --- SYS ---
# @intent:responsibility SYS nnn 命令を実行します。マシン語ルーチン呼び出しは無視され、PCは通常通り進みます。
def execute_sys(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    pass

# --- RET ---
# @intent:responsibility RET 命令を実行し、スタックから戻りアドレスを取り出します。
def execute_ret(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.pc = state.pop()

# --- JP ---
# @intent:responsibility JP nnn 命令を実行し、PCを直接設定します。
def execute_jp(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.pc = op.nnn

# --- CALL ---
# @intent:responsibility CALL nnn 命令を実行し、次の命令のアドレスをスタックに積んでからジャンプします。
def execute_call(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    # state.pc is currently pointing to the NEXT instruction because it was updated in CPU.step
    state.push(state.pc, op.nnn)
    state.pc = op.nnn

# --- SE / SNE ---
# @intent:responsibility SE Vx, byte: Vx == kk なら次の命令をスキップします。
def execute_se_byte(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    if state.v[op.x] == op.kk:
        skip_next(state)

# @intent:responsibility SNE Vx, byte: Vx != kk なら次の命令をスキップします。
def execute_sne_byte(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    if state.v[op.x] != op.kk:
        skip_next(state)

# @intent:responsibility SE Vx, Vy: Vx == Vy なら次の命令をスキップします。
def execute_se_reg(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    if state.v[op.x] == state.v[op.y]:
        skip_next(state)

# @intent:responsibility SNE Vx, Vy: Vx != Vy なら次の命令をスキップします。
def execute_sne_reg(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    if state.v[op.x] != state.v[op.y]:
        skip_next(state)

# --- JP V0 ---
# @intent:responsibility JP V0, nnn: nnn + V0 へジャンプします。
# @intent:rationale 結果はマスクしません。0xFFFを超えた場合は次のフェッチでMemoryFaultになります。
def execute_jp_v0(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.pc = op.nnn + state.v[0]
