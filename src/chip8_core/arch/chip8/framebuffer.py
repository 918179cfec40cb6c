# src/chip8_core/arch/chip8/framebuffer.py
"""
64×32 モノクロフレームバッファ。
XOR描画と衝突検出を提供します。描画（画面への出力）はホストの責務です。
"""
from typing import List

from chip8_core.common.types import PixelRows

WIDTH = 64
HEIGHT = 32
SPRITE_WIDTH = 8

# @intent:responsibility 1ビットピクセルの格子を保持し、スプライトのXOR描画を行います。
class FrameBuffer:
    """
    64×32の1ビットピクセル格子。
    座標は描画前に常に画面サイズで剰余を取って正規化されます（ラップアラウンド）。
    """
    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self.width = width
        self.height = height
        self._pixels: List[List[int]] = [[0] * width for _ in range(height)]
        # @intent:rationale ホストが再描画の要否を判断できるよう、変更の有無を記録する。
        self.dirty = True

    def clear(self) -> None:
        for row in self._pixels:
            row[:] = [0] * self.width
        self.dirty = True

    def get_pixel(self, x: int, y: int) -> int:
        return self._pixels[y % self.height][x % self.width]

    # @intent:responsibility 1行分（8ピクセル）のスプライトデータを描画し、衝突の有無を返します。
    def draw_row(self, x: int, y: int, sprite_byte: int) -> bool:
        collided = False
        row = self._pixels[y % self.height]
        for col in range(SPRITE_WIDTH):
            bit = (sprite_byte >> (7 - col)) & 1
            if not bit:
                continue
            px = (x + col) % self.width
            if row[px]:
                collided = True
            row[px] ^= 1
        self.dirty = True
        return collided

    # @intent:responsibility スプライト全体を描画し、いずれかのピクセルで衝突があったかを返します。
    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """
        rowsの各バイトを1行としてXOR描画します。
        セット済みのピクセルが消えた場合に衝突とみなします。
        """
        collided = False
        for offset, sprite_byte in enumerate(rows):
            if self.draw_row(x, y + offset, sprite_byte):
                collided = True
        return collided

    # @intent:responsibility ホストの描画用に不変のコピーを返します。
    def snapshot(self) -> PixelRows:
        return tuple(tuple(row) for row in self._pixels)

    def lit_count(self) -> int:
        return sum(sum(row) for row in self._pixels)
