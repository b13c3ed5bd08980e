# tests/devices/test_display.py
"""
chip8_tracer.devices.displayモジュールの単体テスト。
"""
import pytest

from chip8_tracer.devices.display import DisplayBuffer

# @intent:test_suite スプライトのXOR描画、衝突検出、画面端の折り返しを検証します。

class TestDisplayBuffer:
    @pytest.fixture
    def display(self):
        return DisplayBuffer()

    def test_initially_blank(self, display):
        frame = display.snapshot()
        assert len(frame) == 32
        assert all(len(row) == 64 for row in frame)
        assert not any(any(row) for row in frame)

    # @intent:test_case_draw_sprite スプライトの各ビットがMSBから左へ描画されることを検証します。
    def test_draw_sprite(self, display):
        collision = display.draw_sprite(0, 0, [0b10100000])
        assert collision is False
        assert display.get_pixel(0, 0)
        assert not display.get_pixel(1, 0)
        assert display.get_pixel(2, 0)
        assert display.lit_pixels() == {(0, 0), (2, 0)}

    # @intent:test_case_collision 点灯画素を消した場合に衝突が報告されることを検証します。
    def test_draw_twice_clears_and_collides(self, display):
        sprite = [0xF0, 0x90, 0x90, 0x90, 0xF0]
        assert display.draw_sprite(10, 5, sprite) is False
        assert display.draw_sprite(10, 5, sprite) is True
        assert display.lit_pixels() == set()

    def test_overlap_without_erasing_is_not_collision(self, display):
        display.draw_sprite(0, 0, [0b10000000])
        assert display.draw_sprite(1, 0, [0b10000000]) is False

    # @intent:test_case_wrap 右端・下端からはみ出した画素が反対側に折り返すことを検証します。
    def test_horizontal_and_vertical_wrap(self, display):
        display.draw_sprite(62, 31, [0xF0, 0xF0])
        assert display.get_pixel(62, 31)
        assert display.get_pixel(63, 31)
        assert display.get_pixel(0, 31)
        assert display.get_pixel(1, 31)
        assert display.get_pixel(62, 0)
        assert display.get_pixel(1, 0)

    def test_origin_is_taken_modulo_screen_size(self, display):
        display.draw_sprite(64 + 3, 32 + 4, [0x80])
        assert display.lit_pixels() == {(3, 4)}

    def test_empty_sprite_draws_nothing(self, display):
        assert display.draw_sprite(0, 0, []) is False
        assert display.lit_pixels() == set()

    def test_clear(self, display):
        display.draw_sprite(0, 0, [0xFF])
        display.clear()
        assert display.lit_pixels() == set()

    def test_version_increments_on_change(self, display):
        version = display.version
        display.draw_sprite(0, 0, [0x80])
        assert display.version == version + 1
        display.clear()
        assert display.version == version + 2

    def test_rows_round_trip(self, display):
        display.draw_sprite(5, 5, [0xAA])
        rows = display.get_rows()
        display.clear()
        display.restore_rows(rows)
        assert display.get_rows() == rows

    def test_restore_rows_rejects_wrong_height(self, display):
        with pytest.raises(ValueError):
            display.restore_rows([0] * 31)

    def test_get_pixel_out_of_range(self, display):
        with pytest.raises(ValueError):
            display.get_pixel(64, 0)
