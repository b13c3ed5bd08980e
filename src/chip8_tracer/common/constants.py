"""
Chip-8 アーキテクチャの固定値。
"""

MEMORY_SIZE = 0x1000        # 4KB
PROGRAM_START = 0x200       # ROMのロード先
PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START  # 3584 bytes

FONT_START = 0x050          # フォントスプライトの格納先
FONT_SPRITE_SIZE = 5        # 1文字あたりのバイト数

REGISTER_COUNT = 16         # V0-VF
FLAG_REGISTER = 0xF         # VF
STACK_DEPTH = 16
INSTRUCTION_LENGTH = 2

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
KEY_COUNT = 16

TIMER_HZ = 60               # 遅延/サウンドタイマーの減算周期
