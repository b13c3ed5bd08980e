# src/chip8_tracer/arch/chip8/instructions/base.py
"""
Chip-8命令実装用の共通定義とユーティリティ。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.common.constants import INSTRUCTION_LENGTH
from chip8_tracer.core.snapshot import Operation

# @intent:responsibility Chip-8の35種類の命令を閉じた列挙型として定義します。
class OpKind(Enum):
    SYS = "0nnn"
    CLS = "00E0"
    RET = "00EE"
    JP = "1nnn"
    CALL = "2nnn"
    SE_BYTE = "3xkk"
    SNE_BYTE = "4xkk"
    SE_REG = "5xy0"
    LD_BYTE = "6xkk"
    ADD_BYTE = "7xkk"
    LD_REG = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_REG = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNE_REG = "9xy0"
    LD_I = "Annn"
    JP_V0 = "Bnnn"
    RND = "Cxkk"
    DRW = "Dxyn"
    SKP = "Ex9E"
    SKNP = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I = "Fx1E"
    LD_F = "Fx29"
    LD_B = "Fx33"
    LD_MEM_VX = "Fx55"
    LD_VX_MEM = "Fx65"

# @intent:responsibility デコード済みのChip-8命令。命令種別とビットフィールドを保持します。
@dataclass(frozen=True)
class Chip8Operation(Operation):
    kind: Optional[OpKind] = None
    word: int = 0x0000
    x: int = 0      # bits 8-11
    y: int = 0      # bits 4-7
    n: int = 0      # bits 0-3
    kk: int = 0     # bits 0-7
    nnn: int = 0    # bits 0-11

# @intent:utility_function 命令語から固定のビットフィールドを取り出します。
def split_fields(word: int) -> Dict[str, int]:
    return {
        "group": (word >> 12) & 0xF,
        "x": (word >> 8) & 0xF,
        "y": (word >> 4) & 0xF,
        "n": word & 0xF,
        "kk": word & 0xFF,
        "nnn": word & 0xFFF,
    }

# @intent:utility_function 次の命令を読み飛ばします。PCは既に次の命令を指しているため、さらに2進めます。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + INSTRUCTION_LENGTH) & 0xFFFF
