# chip8_tracer/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（レジスタ群）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass, replace

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    具体的なレジスタ（V0-VF, I など）は arch 側のサブクラスで追加されます。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer

    # @intent:responsibility 状態の独立したコピーを返します。
    # @intent:rationale Snapshotが後続の命令実行によって書き換えられないようにするため。
    #                  ミュータブルなフィールドを持つサブクラスはこれをオーバーライドします。
    def copy(self) -> "CpuState":
        return replace(self)
