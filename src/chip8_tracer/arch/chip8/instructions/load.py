# src/chip8_tracer/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、インデックス、メモリ、タイマー）の実装。

Iをアドレスとして使う命令は、アクセス範囲全体を先に検証してから書き込みます。
"""
from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation

# --- LD Vx, byte / LD Vx, Vy ---
def execute_ld_byte(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.v[op.x] = op.kk

def execute_ld_reg(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.v[op.x] = state.v[op.y]

# --- LD I, addr ---
def execute_ld_i(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.i = op.nnn

# --- ADD I, Vx ---
# @intent:responsibility I に Vx を加算します。0xFFFを超えてもVFは変更しません。
def execute_add_i(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF

# --- LD F, Vx ---
# @intent:responsibility Vxの下位ニブルが示す16進数字のフォントスプライトのアドレスをIに設定します。
def execute_ld_f(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.i = machine.memory.font_address(state.v[op.x] & 0xF)

# --- LD B, Vx ---
# @intent:responsibility Vxの10進表現（百の位、十の位、一の位）を I, I+1, I+2 に格納します。
def execute_ld_b(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    value = state.v[op.x]
    digits = bytes([value // 100, (value // 10) % 10, value % 10])
    machine.memory.write_block(state.i, digits)

# --- LD [I], Vx ---
# @intent:responsibility V0〜Vx を I から始まるメモリへ格納します。Iは変化しません。
def execute_ld_mem_vx(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    machine.memory.write_block(state.i, bytes(state.v[:op.x + 1]))

# --- LD Vx, [I] ---
# @intent:responsibility I から始まるメモリを V0〜Vx へ読み込みます。Iは変化しません。
def execute_ld_vx_mem(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    data = machine.memory.read_block(state.i, op.x + 1)
    state.v[:op.x + 1] = list(data)

# --- Timers ---
def execute_ld_vx_dt(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    state.v[op.x] = machine.timers.get_delay()

def execute_ld_dt_vx(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    machine.timers.set_delay(state.v[op.x])

def execute_ld_st_vx(state: Chip8CpuState, machine: Chip8Machine, op: Chip8Operation) -> None:
    machine.timers.set_sound(state.v[op.x])
