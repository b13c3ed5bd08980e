# chip8_tracer/devices/display.py
"""
64x32 モノクロ表示バッファ。

スプライトは既存の画素とXOR合成され、点灯していた画素が消えた場合に衝突として報告されます。
描画は画面端で反対側へ折り返します。
"""
from typing import Iterable, Set, Tuple

from chip8_tracer.common.constants import DISPLAY_HEIGHT, DISPLAY_WIDTH
from chip8_tracer.common.types import Frame

SPRITE_WIDTH = 8


# @intent:responsibility 表示バッファの画素状態を保持し、スプライトのXOR描画を行います。
class DisplayBuffer:
    """
    1画素1ビットの表示バッファ。
    内部では各行を64bitの整数として保持します（ビット63が x=0）。
    """
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._rows = [0] * height
        self._version = 0

    # @intent:responsibility 全画素を消灯します。
    def clear(self) -> None:
        self._rows = [0] * self.height
        self._version += 1

    def _bit(self, x: int) -> int:
        return 1 << (self.width - 1 - x)

    def get_pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} display.")
        return bool(self._rows[y] & self._bit(x))

    # @intent:responsibility スプライトをXOR描画し、衝突の有無を返します。
    # @intent:pre-condition sprite の各要素は8bit値（1行8画素、MSBが左端）です。
    def draw_sprite(self, x: int, y: int, sprite: Iterable[int]) -> bool:
        """
        (x, y) を左上としてスプライトを描画します。
        原点は画面サイズで剰余を取り、各画素は水平・垂直方向に折り返します。
        点灯→消灯の遷移が1つでもあれば True を返します。
        """
        origin_x = x % self.width
        origin_y = y % self.height
        collision = False

        for row_offset, row_bits in enumerate(sprite):
            py = (origin_y + row_offset) % self.height
            row = self._rows[py]
            for col in range(SPRITE_WIDTH):
                if not row_bits & (0x80 >> col):
                    continue
                mask = self._bit((origin_x + col) % self.width)
                if row & mask:
                    collision = True
                row ^= mask
            self._rows[py] = row

        self._version += 1
        return collision

    # @intent:responsibility 描画協調者向けに読み取り専用のフレームを返します。
    def snapshot(self) -> Frame:
        return tuple(
            tuple(bool(row & self._bit(x)) for x in range(self.width))
            for row in self._rows
        )

    # @intent:responsibility 点灯している画素の座標集合を返します。
    def lit_pixels(self) -> Set[Tuple[int, int]]:
        return {
            (x, y)
            for y, row in enumerate(self._rows) if row
            for x in range(self.width) if row & self._bit(x)
        }

    # @intent:responsibility 行単位のビット列を返します。スナップショットへの軽量な保存に使用します。
    def get_rows(self) -> Tuple[int, ...]:
        return tuple(self._rows)

    def restore_rows(self, rows: Iterable[int]) -> None:
        rows = list(rows)
        if len(rows) != self.height:
            raise ValueError(f"Expected {self.height} rows, got {len(rows)}.")
        self._rows = rows
        self._version += 1

    # @intent:responsibility 内容が変化するたびに増加する版数。描画協調者が再描画の要否を判定します。
    @property
    def version(self) -> int:
        return self._version
