# chip8_tracer/loader/loader.py
"""
プログラムローダーモジュール。
生バイナリ形式（.ch8）と16進リスティング形式のロードをサポートします。
"""
import logging
from typing import List

from chip8_tracer.arch.chip8.cpu import Chip8Cpu

logger = logging.getLogger(__name__)

class RomLoader:
    """
    ヘッダを持たない生バイナリのROMファイルを読み込み、0x200からロードするローダー。
    """
    def read(self, file_path: str) -> bytes:
        with open(file_path, 'rb') as f:
            return f.read()

    def load(self, file_path: str, cpu: Chip8Cpu) -> int:
        program = self.read(file_path)
        cpu.load_program(program)
        logger.info("Loaded %d bytes from %s", len(program), file_path)
        return len(program)

class HexListingLoader:
    """
    1行に1つの16bit命令語を16進で記述したテキストを解析するローダー。
    空行と ';' で始まる行は無視し、行末の '; コメント' は取り除きます。

        ; draw digit 0
        6000    ; LD V0, #00
        F029
    """
    def parse_lines(self, lines: List[str]) -> bytes:
        program = bytearray()
        for line_num, line in enumerate(lines, 1):
            comment_start = line.find(';')
            if comment_start != -1:
                line = line[:comment_start]
            line = line.strip()
            if not line:
                continue

            if line.lower().startswith("0x"):
                line = line[2:]
            if len(line) != 4:
                raise ValueError(f"Invalid instruction word on line {line_num}: '{line}' (expected 4 hex digits)")
            try:
                word = int(line, 16)
            except ValueError:
                raise ValueError(f"Invalid instruction word on line {line_num}: '{line}'") from None
            program.append(word >> 8)
            program.append(word & 0xFF)
        return bytes(program)

    def read(self, file_path: str) -> bytes:
        with open(file_path, 'r', encoding="utf-8") as f:
            return self.parse_lines(f.readlines())

    def load(self, file_path: str, cpu: Chip8Cpu) -> int:
        program = self.read(file_path)
        cpu.load_program(program)
        logger.info("Loaded %d instruction words from %s", len(program) // 2, file_path)
        return len(program)

# @intent:responsibility 形式名（"binary" / "hex"）に対応するローダーを返します。
def get_loader(rom_format: str):
    if rom_format == "binary":
        return RomLoader()
    if rom_format == "hex":
        return HexListingLoader()
    raise ValueError(f"Unsupported ROM format: {rom_format}")
