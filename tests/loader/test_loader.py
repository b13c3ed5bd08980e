# tests/loader/test_loader.py
"""
chip8_tracer.loader.loaderモジュールの単体テスト。
"""
import pytest

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.common.errors import RomTooLarge
from chip8_tracer.loader.loader import HexListingLoader, RomLoader, get_loader

# @intent:test_suite 生バイナリと16進リスティングのロードを検証します。

class TestRomLoader:
    def test_load_binary(self, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0x12, 0x00, 0xFF]))
        cpu = Chip8Cpu()
        size = RomLoader().load(str(rom), cpu)
        assert size == 3
        memory = cpu.get_memory()
        assert [memory.peek(0x200 + n) for n in range(3)] == [0x12, 0x00, 0xFF]
        assert cpu.get_state().pc == 0x200

    def test_rom_too_large(self, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes(0x1000 - 0x200 + 1))
        with pytest.raises(RomTooLarge):
            RomLoader().load(str(rom), Chip8Cpu())

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RomLoader().read(str(tmp_path / "missing.ch8"))


class TestHexListingLoader:
    @pytest.fixture
    def loader(self):
        return HexListingLoader()

    # @intent:test_case_parse コメント、空行、0x接頭辞を含むリスティングを解析できることを検証します。
    def test_parse_lines(self, loader):
        lines = [
            "; draw digit 0",
            "",
            "6000    ; LD V0, #00",
            "0xF029",
            "  d015  ",
        ]
        assert loader.parse_lines(lines) == bytes([0x60, 0x00, 0xF0, 0x29, 0xD0, 0x15])

    @pytest.mark.parametrize("line", ["600", "60000", "G000", "0x12"])
    def test_invalid_word(self, loader, line):
        with pytest.raises(ValueError, match="line 2"):
            loader.parse_lines(["00E0", line])

    def test_load_file(self, loader, tmp_path):
        listing = tmp_path / "prog.hex"
        listing.write_text("00E0\n1200\n")
        cpu = Chip8Cpu()
        assert loader.load(str(listing), cpu) == 4
        assert cpu.get_memory().peek(0x202) == 0x12


def test_get_loader():
    assert isinstance(get_loader("binary"), RomLoader)
    assert isinstance(get_loader("hex"), HexListingLoader)
    with pytest.raises(ValueError):
        get_loader("elf")
