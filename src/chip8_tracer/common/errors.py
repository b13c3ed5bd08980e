"""
コアが送出する例外の定義。

いずれも命令の途中で回復できない構造的な失敗であり、ドライバへそのまま伝播します。
停止するか、命令を読み飛ばすかはドライバ側のポリシーで決定します。
"""
from typing import Optional


# @intent:responsibility コアが送出する全ての例外の基底クラスです。
class Chip8Error(Exception):
    pass


# @intent:responsibility アドレス空間(0x000-0xFFF)の外側へのアクセスを表します。
class MemoryFault(Chip8Error):
    def __init__(self, address: int, length: int = 1):
        self.address = address
        self.length = length
        if length == 1:
            message = f"Memory access at {address:#06x} is outside 0x000-0xFFF."
        else:
            message = (
                f"Memory block {address:#06x}+{length} is outside 0x000-0xFFF."
            )
        super().__init__(message)


# @intent:responsibility プログラム領域に収まらないROMのロードを表します。
class RomTooLarge(Chip8Error):
    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"ROM is {size} bytes, but only {capacity} bytes are available.")


# @intent:responsibility スタックが満杯の状態でのCALLを表します。
class StackOverflow(Chip8Error):
    def __init__(self, address: int, depth: int):
        self.address = address
        self.depth = depth
        super().__init__(f"CALL {address:#05x} with {depth} frames already on the stack.")


# @intent:responsibility 空のスタックでのRETを表します。
class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("RET with an empty stack.")


# @intent:responsibility どの命令にも一致しない命令語を表します。
class UnknownOpcode(Chip8Error):
    def __init__(self, word: int, address: Optional[int] = None):
        self.word = word
        self.address = address
        where = f" at {address:#06x}" if address is not None else ""
        super().__init__(f"Unknown opcode {word:04X}{where}.")
