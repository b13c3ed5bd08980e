# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

フラグを生成する命令は、結果をVxへ格納した後にVFを書き込みます。
そのため Vx が VF 自身の場合はフラグの値が最終的に残ります。
"""
from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation

# --- ADD Vx, byte ---
# @intent:responsibility 8bitで折り返す加算。VFは変更しません。
def execute_add_byte(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.v[op.x] = (state.v[op.x] + op.kk) & 0xFF

# --- OR / AND / XOR ---
def execute_or(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.v[op.x] = state.v[op.x] | state.v[op.y]

def execute_and(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.v[op.x] = state.v[op.x] & state.v[op.y]

def execute_xor(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.v[op.x] = state.v[op.x] ^ state.v[op.y]

# --- ADD Vx, Vy ---
# @intent:responsibility 加算結果をVxに格納し、キャリー(255超過)をVFに設定します。
def execute_add_reg(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    v1 = state.v[op.x]
    v2 = state.v[op.y]
    res = v1 + v2
    state.v[op.x] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# --- SUB Vx, Vy ---
# @intent:responsibility Vx - Vy をVxに格納し、ボローが無ければ(Vx >= Vy) VF=1 とします。
def execute_sub(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    v1 = state.v[op.x]
    v2 = state.v[op.y]
    state.v[op.x] = (v1 - v2) & 0xFF
    state.vf = 1 if v1 >= v2 else 0

# --- SUBN Vx, Vy ---
# @intent:responsibility Vy - Vx をVxに格納し、ボローが無ければ(Vy >= Vx) VF=1 とします。
def execute_subn(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    v1 = state.v[op.x]
    v2 = state.v[op.y]
    state.v[op.x] = (v2 - v1) & 0xFF
    state.vf = 1 if v2 >= v1 else 0

# --- SHR / SHL ---
# @intent:responsibility Vxを右へ1bitシフトし、シフト前のLSBをVFに設定します。Vyは使用しません。
def execute_shr(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    v1 = state.v[op.x]
    state.v[op.x] = v1 >> 1
    state.vf = v1 & 0x01

# @intent:responsibility Vxを左へ1bitシフトし、シフト前のMSBをVFに設定します。Vyは使用しません。
def execute_shl(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    v1 = state.v[op.x]
    state.v[op.x] = (v1 << 1) & 0xFF
    state.vf = (v1 >> 7) & 0x01

# --- RND ---
# @intent:responsibility 乱数源から得た1バイトと kk の論理積をVxに格納します。
def execute_rnd(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.v[op.x] = (machine.random_byte() & 0xFF) & op.kk
