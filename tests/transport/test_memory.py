# tests/transport/test_memory.py
"""
chip8_tracer.transport.memoryモジュールの単体テスト。
"""
import pytest

from chip8_tracer.common.errors import MemoryFault, RomTooLarge
from chip8_tracer.transport.memory import FONT_SET, Memory, MemoryAccess, MemoryAccessType

# @intent:test_suite 4KBアドレス空間の範囲検証、アクセスログ、ROMロードを検証します。

class TestMemory:
    @pytest.fixture
    def memory(self):
        return Memory()

    # @intent:test_case_font_loaded フォントが0x050から配置されていることを検証します。
    def test_font_loaded(self, memory):
        assert memory.read_block(0x050, 80) == FONT_SET
        assert memory.read_font_sprite(0x0) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])
        assert memory.read_font_sprite(0xF) == bytes([0xF0, 0x80, 0xF0, 0x80, 0x80])
        assert Memory.font_address(0xA) == 0x050 + 50

    def test_font_digit_out_of_range(self, memory):
        with pytest.raises(ValueError):
            memory.read_font_sprite(0x10)

    # @intent:test_case_read_write 読み書きとアクセスログの記録を検証します。
    def test_read_write_and_log(self, memory):
        memory.write_byte(0x300, 0xAB)
        assert memory.read_byte(0x300) == 0xAB
        log = memory.get_and_clear_activity_log()
        assert log == [
            MemoryAccess(0x300, 0xAB, MemoryAccessType.WRITE, 0x00),
            MemoryAccess(0x300, 0xAB, MemoryAccessType.READ),
        ]
        assert memory.get_and_clear_activity_log() == []

    def test_peek_does_not_log(self, memory):
        memory.write_byte(0x400, 0x12)
        memory.get_and_clear_activity_log()
        assert memory.peek(0x400) == 0x12
        assert memory.get_and_clear_activity_log() == []

    def test_write_rejects_non_byte(self, memory):
        with pytest.raises(ValueError):
            memory.write_byte(0x300, 0x100)

    # @intent:test_case_out_of_range 範囲外アクセスが全てMemoryFaultになることを検証します。
    @pytest.mark.parametrize("address", [-1, 0x1000, 0xFFFF])
    def test_out_of_range_access(self, memory, address):
        with pytest.raises(MemoryFault) as exc_info:
            memory.read_byte(address)
        assert exc_info.value.address == address
        with pytest.raises(MemoryFault):
            memory.write_byte(address, 0)

    def test_read_word_big_endian(self, memory):
        memory.write_byte(0x200, 0x12)
        memory.write_byte(0x201, 0x34)
        assert memory.read_word(0x200) == 0x1234

    def test_read_word_at_last_byte_faults(self, memory):
        with pytest.raises(MemoryFault):
            memory.read_word(0xFFF)

    # @intent:test_case_block_atomic 範囲外を含むブロック書き込みは1バイトも書き込まないことを検証します。
    def test_write_block_is_atomic(self, memory):
        with pytest.raises(MemoryFault):
            memory.write_block(0xFFE, bytes([1, 2, 3]))
        assert memory.peek(0xFFE) == 0
        assert memory.peek(0xFFF) == 0
        assert memory.get_and_clear_activity_log() == []

    def test_read_block_at_end_of_memory(self, memory):
        memory.write_block(0xFFD, bytes([7, 8, 9]))
        assert memory.read_block(0xFFD, 3) == bytes([7, 8, 9])

    # @intent:test_case_load_program ROMが0x200にロードされ、ログに記録されないことを検証します。
    def test_load_program(self, memory):
        memory.load_program(bytes([0x00, 0xE0, 0x12, 0x00]))
        assert memory.peek(0x200) == 0x00
        assert memory.peek(0x201) == 0xE0
        assert memory.peek(0x203) == 0x00
        assert memory.get_and_clear_activity_log() == []

    def test_load_max_size_program(self, memory):
        program = bytes(i & 0xFF for i in range(3584))
        memory.load_program(program)
        assert bytes(memory.peek(0x200 + i) for i in range(3584)) == program

    def test_load_too_large_program(self, memory):
        with pytest.raises(RomTooLarge) as exc_info:
            memory.load_program(bytes(3585))
        assert exc_info.value.size == 3585
        assert exc_info.value.capacity == 3584
        assert memory.peek(0x200) == 0

    # @intent:test_case_reload 再ロード時に前回のプログラムの残りと書き込みが消えることを検証します。
    def test_reload_clears_previous_program(self, memory):
        memory.load_program(bytes([0x60, 0x05, 0x61, 0x07, 0x62, 0x09]))
        memory.write_byte(0x300, 0xAB)
        memory.load_program(bytes([0x63, 0x01]))
        assert memory.peek(0x200) == 0x63
        assert memory.peek(0x202) == 0
        assert memory.peek(0x204) == 0
        assert memory.peek(0x300) == 0
        assert memory.read_block(0x050, 80) == FONT_SET

    def test_rejected_program_keeps_memory(self, memory):
        memory.load_program(bytes([0x12, 0x00]))
        memory.write_byte(0x300, 0xAB)
        with pytest.raises(RomTooLarge):
            memory.load_program(bytes(3585))
        assert memory.peek(0x200) == 0x12
        assert memory.peek(0x300) == 0xAB

    def test_restore_is_not_logged(self, memory):
        memory.restore(0x300, 0x55)
        assert memory.peek(0x300) == 0x55
        assert memory.get_and_clear_activity_log() == []

    def test_reset_keeps_font(self, memory):
        memory.write_byte(0x300, 0x55)
        memory.reset()
        assert memory.peek(0x300) == 0
        assert memory.read_font_sprite(0x1) == bytes([0x20, 0x60, 0x20, 0x20, 0x70])
