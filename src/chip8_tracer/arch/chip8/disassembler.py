# src/chip8_tracer/arch/chip8/disassembler.py
"""
Chip-8 Disassembler

メモリ上の命令語を解析し、Chip-8のアセンブリ表記（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用しますが、アクセスログを汚さないように
Memory.peek() のみを使用します。
"""
from typing import List, Tuple

from chip8_tracer.common.constants import INSTRUCTION_LENGTH
from chip8_tracer.transport.memory import Memory
from .instructions import decode_opcode, lookup_kind

# @intent:responsibility 1つの命令語をニーモニック文字列に変換します。
def format_word(word: int) -> str:
    """
    命令語を "MNEMONIC operands" 形式に変換します。
    どの命令にも該当しない語（データ領域など）は "DW #HHLL" になります。
    """
    if lookup_kind(word) is None:
        return f"DW #{word:04X}"
    operation = decode_opcode(word)
    if operation.operands:
        return f"{operation.mnemonic} {', '.join(operation.operands)}"
    return operation.mnemonic

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, memory.get_size())

    while current_addr < end_addr:
        if current_addr + INSTRUCTION_LENGTH > memory.get_size():
            # 末尾の半端な1バイトはデータとして表示
            byte = memory.peek(current_addr)
            result.append((current_addr, f"{byte:02X}", f"DB #{byte:02X}"))
            break

        high = memory.peek(current_addr)
        low = memory.peek(current_addr + 1)
        word = (high << 8) | low
        result.append((current_addr, f"{high:02X} {low:02X}", format_word(word)))
        current_addr += INSTRUCTION_LENGTH

    return result
