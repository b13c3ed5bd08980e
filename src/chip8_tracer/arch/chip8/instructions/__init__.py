# src/chip8_tracer/arch/chip8/instructions/__init__.py
"""
Chip-8命令セット実装パッケージ。
"""
from typing import Optional

from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.common.errors import UnknownOpcode
from .base import Chip8Operation, OpKind, split_fields
from .maps import DECODE_MAP, DISCRIMINATORS, EXECUTE_MAP, SYNTAX_MAP

# @intent:responsibility 命令語から命令種別を決定します。該当が無ければ None を返します。
def lookup_kind(word: int) -> Optional[OpKind]:
    fields = split_fields(word)
    group = fields["group"]
    discriminator = DISCRIMINATORS.get(group)
    key = (group, fields[discriminator] if discriminator else None)
    kind = DECODE_MAP.get(key)
    if kind is None and group == 0x0:
        return OpKind.SYS
    return kind

# @intent:responsibility Chip-8の命令語をデコードします。
def decode_opcode(word: int, pc: Optional[int] = None) -> Chip8Operation:
    """
    16bitの命令語をデコードし、Chip8Operationオブジェクトを返します。
    どの命令にも一致しない場合は UnknownOpcode を送出します。
    """
    kind = lookup_kind(word)
    if kind is None:
        raise UnknownOpcode(word, pc)
    fields = split_fields(word)
    mnemonic, templates = SYNTAX_MAP[kind]
    return Chip8Operation(
        opcode_hex=f"{word:04X}",
        mnemonic=mnemonic,
        operands=[template.format(**fields) for template in templates],
        kind=kind,
        word=word,
        x=fields["x"],
        y=fields["y"],
        n=fields["n"],
        kk=fields["kk"],
        nnn=fields["nnn"],
    )

# @intent:responsibility デコードされたChip-8命令を実行します。
def execute_instruction(operation: Chip8Operation, state: Chip8CpuState, machine: Chip8Machine) -> None:
    """
    デコードされたChip-8命令を実行し、CPUとデバイスの状態を変更します。
    """
    executor = EXECUTE_MAP[operation.kind]
    executor(state, machine, operation)
