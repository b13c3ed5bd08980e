# src/chip8_tracer/arch/chip8/machine.py
"""
命令実装に渡されるデバイス集合体。
"""
import random
from dataclasses import dataclass, field

from chip8_tracer.common.types import RandomSource
from chip8_tracer.devices.display import DisplayBuffer
from chip8_tracer.devices.keypad import Keypad
from chip8_tracer.devices.timers import Timers
from chip8_tracer.transport.memory import Memory


def default_random_source() -> RandomSource:
    rng = random.Random()
    return lambda: rng.getrandbits(8)


# @intent:responsibility レジスタファイル以外の、1台のChip-8マシンを構成する状態をまとめます。
# @intent:rationale 命令実装は (state, machine, op) を受け取り、グローバルな状態を一切参照しません。
@dataclass
class Chip8Machine:
    memory: Memory = field(default_factory=Memory)
    display: DisplayBuffer = field(default_factory=DisplayBuffer)
    keypad: Keypad = field(default_factory=Keypad)
    timers: Timers = field(default_factory=Timers)
    random_byte: RandomSource = field(default_factory=default_random_source)
