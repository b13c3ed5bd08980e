# chip8_tracer/transport/memory.py
"""
Transport Layer (メモリ空間)

このモジュールは、Chip-8の4KBフラットなアドレス空間を抽象化し、
読み書きアクセスの範囲検証と記録を行う責務を負います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from chip8_tracer.common.constants import (
    FONT_SPRITE_SIZE,
    FONT_START,
    MEMORY_SIZE,
    PROGRAM_START,
)
from chip8_tracer.common.errors import MemoryFault, RomTooLarge

# @intent:constant 16進数字0-Fのフォントスプライト(4x5ドット)。各バイトの上位ニブルが1行を表します。
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# @intent:responsibility メモリアクセスを記録するためのタイプを定義します。
class MemoryAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のメモリアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class MemoryAccess:
    """
    メモリ上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    書き込みの場合、previous_data に上書き前の値を保持し、デバッガのステップバックに使用します。
    """
    address: int
    data: int # 8bit value
    access_type: MemoryAccessType
    previous_data: Optional[int] = None

# @intent:responsibility 4KBのアドレス空間を管理し、全てのアクセスを検証・記録します。
# @intent:rationale 全てのアクセスを記録し、Snapshotに含めることでシステムの観測可能性を高めます。
class Memory:
    """
    Chip-8のメインメモリ。
    0x000-0x1FF はフォントとインタプリタ予約領域、0x200 以降がプログラム領域です。
    範囲外のアクセスは全て MemoryFault になります。
    """
    # @intent:responsibility メモリ領域を初期化し、フォントを配置します。
    def __init__(self, size: int = MEMORY_SIZE):
        if not isinstance(size, int) or size <= PROGRAM_START:
            raise ValueError(f"Memory size must be an integer larger than {PROGRAM_START:#05x}.")
        self._size = size
        self._memory = bytearray(size)
        self._activity_log: List[MemoryAccess] = []
        self._load_font()

    def _load_font(self) -> None:
        self._memory[FONT_START:FONT_START + len(FONT_SET)] = FONT_SET

    # @intent:responsibility 全内容をゼロクリアし、フォントを再配置します。
    def reset(self) -> None:
        self._memory = bytearray(self._size)
        self._activity_log = []
        self._load_font()

    # @intent:responsibility アドレス範囲を検証します。
    # @intent:post-condition 範囲外であればMemoryFaultを送出し、メモリは一切変更されません。
    def _check_range(self, address: int, length: int = 1) -> None:
        if address < 0 or length < 0 or address + length > self._size:
            raise MemoryFault(address, length)

    def _log_access(self, address: int, data: int, access_type: MemoryAccessType,
                    previous_data: Optional[int] = None) -> None:
        self._activity_log.append(MemoryAccess(address, data, access_type, previous_data))

    # @intent:responsibility 記録されたアクセスログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[MemoryAccess]:
        """
        現在のアクセスログを返し、内部ログをクリアします。
        """
        log = self._activity_log
        self._activity_log = []
        return log

    def get_size(self) -> int:
        return self._size

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    def read_byte(self, address: int) -> int:
        self._check_range(address)
        data = self._memory[address]
        self._log_access(address, data, MemoryAccessType.READ)
        return data

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        """
        UIや逆アセンブラなどのインスペクタ用。アクセスログを汚しません。
        """
        self._check_range(address)
        return self._memory[address]

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    # @intent:pre-condition データは8bit値である必要があります。
    def write_byte(self, address: int, data: int) -> None:
        self._check_range(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        previous = self._memory[address]
        self._memory[address] = data
        self._log_access(address, data, MemoryAccessType.WRITE, previous)

    # @intent:responsibility 連続したバイト列を読み出します。範囲全体を先に検証します。
    def read_block(self, address: int, length: int) -> bytes:
        self._check_range(address, length)
        for offset in range(length):
            self._log_access(address + offset, self._memory[address + offset], MemoryAccessType.READ)
        return bytes(self._memory[address:address + length])

    # @intent:responsibility 連続したバイト列を書き込みます。
    # @intent:post-condition 範囲外を含む場合は1バイトも書き込まれません。
    def write_block(self, address: int, data: bytes) -> None:
        self._check_range(address, len(data))
        if any(not 0 <= b <= 0xFF for b in data):
            raise ValueError("Block contains a value that is not an 8-bit value.")
        for offset, b in enumerate(data):
            self.write_byte(address + offset, b)

    # @intent:utility_function 16ビットワードをビッグエンディアン形式で読み込みます。
    def read_word(self, address: int) -> int:
        self._check_range(address, 2)
        return (self.read_byte(address) << 8) | self.read_byte(address + 1)

    # @intent:responsibility プログラム(ROM)をプログラム領域(0x200〜)に書き込みます。
    # @intent:rationale ロードは実行サイクル外の操作であるため、アクセスログには記録しません。
    def load_program(self, program: bytes) -> None:
        capacity = self._size - PROGRAM_START
        if len(program) > capacity:
            raise RomTooLarge(len(program), capacity)
        # 前回のプログラムとその書き込みを残さない
        self.reset()
        self._memory[PROGRAM_START:PROGRAM_START + len(program)] = bytes(program)

    # @intent:responsibility ログを記録せずに1バイトを書き戻します。デバッガのステップバック用。
    def restore(self, address: int, data: int) -> None:
        self._check_range(address)
        self._memory[address] = data

    # @intent:responsibility 16進数字のフォントスプライトが格納されたアドレスを返します。
    @staticmethod
    def font_address(digit: int) -> int:
        if not 0 <= digit <= 0xF:
            raise ValueError(f"Font digit {digit} is not in 0x0-0xF.")
        return FONT_START + digit * FONT_SPRITE_SIZE

    # @intent:responsibility 16進数字のフォントスプライト(5バイト)を返します。
    def read_font_sprite(self, digit: int) -> bytes:
        start = self.font_address(digit)
        self._check_range(start, FONT_SPRITE_SIZE)
        return bytes(self._memory[start:start + FONT_SPRITE_SIZE])
