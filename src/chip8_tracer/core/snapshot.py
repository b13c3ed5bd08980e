# chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、CPU・周辺デバイス・メモリアクセスの状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッガのステップバックに用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.memory import MemoryAccess, MemoryAccessType



# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "1234"
    mnemonic: str # 例: "JP"
    operands: List[str] = field(default_factory=list) # 例: ["#234"]
    cycle_count: int = 1 # 命令の実行回数としてカウントされる値
    length: int = 2 # 命令のバイト長

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計命令数、逆アセンブル表記）を記録するデータクラス。
    """
    cycle_count: int
    disassembly: Optional[str] = None # 例: "0200: LD V1, #05"

# @intent:responsibility CPUの外側にあるデバイス（タイマー・表示・キーパッド）の状態を記録します。
@dataclass(frozen=True)
class DeviceState:
    delay_timer: int = 0
    sound_timer: int = 0
    frame_rows: Tuple[int, ...] = () # DisplayBuffer.get_rows() の値
    awaiting_register: Optional[int] = None # キー入力待ち中ならその格納先レジスタ

# @intent:responsibility ある一時点におけるCPUとデバイスの完全な状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    ある一時点における、CPUとデバイスの完全な状態を記録した不変のデータ構造。
    state は生成時にコピーされたものであり、後続の実行で変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[MemoryAccess] = field(default_factory=list)
    devices: Optional[DeviceState] = None
