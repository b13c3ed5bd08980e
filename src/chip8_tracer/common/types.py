"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Callable, List, NamedTuple, Tuple

# @intent:data_structure 0〜255のバイト値を1つ返す乱数源。RND命令が使用します。
# テストでは固定値を返す関数に差し替えることで、マスク結果を厳密に検証できます。
RandomSource = Callable[[], int]

# @intent:data_structure 表示用フレーム。frame[y][x] が各画素の点灯状態を表します。
Frame = Tuple[Tuple[bool, ...], ...]

# @intent:data_structure 単一のレジスタの表示定義。UIが動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Pointers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
