from dataclasses import dataclass, field
from typing import Dict, Optional

# @intent:constant ホストのキー名からChip-8のキー番号への既定の対応表。
DEFAULT_KEY_MAP: Dict[str, int] = {
    "X": 0x0, "Z": 0x1, "S": 0x2, "C": 0x3,
    "A": 0x4, "Space": 0x5, "D": 0x6, "Q": 0x7,
    "W": 0x8, "E": 0x9, "1": 0xA, "2": 0xB,
    "3": 0xC, "4": 0xD, "5": 0xE, "6": 0xF,
}

ROM_FORMATS = ("binary", "hex")
ERROR_POLICIES = ("halt", "skip")

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#33FF66"
    background: str = "#101010"

@dataclass
class SystemConfig:
    rom: Optional[str] = None
    format: str = "binary"  # "binary", "hex"
    cpu_hz: int = 700
    on_error: str = "halt"  # "halt", "skip"
    log_level: str = "WARNING"
    random_seed: Optional[int] = None
    history_size: int = 1000
    display: DisplayConfig = field(default_factory=DisplayConfig)
    key_map: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))
