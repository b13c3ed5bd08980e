# tests/arch/chip8/test_decoder.py
"""
Chip-8命令デコーダの単体テスト。
"""
import pytest

from chip8_tracer.arch.chip8.instructions import decode_opcode, lookup_kind
from chip8_tracer.arch.chip8.instructions.base import OpKind
from chip8_tracer.arch.chip8.instructions.maps import EXECUTE_MAP, SYNTAX_MAP
from chip8_tracer.common.errors import UnknownOpcode

# @intent:test_suite 命令語から35種類の命令への全域的な対応付けを検証します。

# 各命令種別の代表的な命令語
REPRESENTATIVE_WORDS = {
    OpKind.SYS: 0x0123, OpKind.CLS: 0x00E0, OpKind.RET: 0x00EE,
    OpKind.JP: 0x1ABC, OpKind.CALL: 0x2ABC, OpKind.SE_BYTE: 0x3A42,
    OpKind.SNE_BYTE: 0x4A42, OpKind.SE_REG: 0x5AB0, OpKind.LD_BYTE: 0x6A42,
    OpKind.ADD_BYTE: 0x7A42, OpKind.LD_REG: 0x8AB0, OpKind.OR: 0x8AB1,
    OpKind.AND: 0x8AB2, OpKind.XOR: 0x8AB3, OpKind.ADD_REG: 0x8AB4,
    OpKind.SUB: 0x8AB5, OpKind.SHR: 0x8AB6, OpKind.SUBN: 0x8AB7,
    OpKind.SHL: 0x8ABE, OpKind.SNE_REG: 0x9AB0, OpKind.LD_I: 0xA123,
    OpKind.JP_V0: 0xB123, OpKind.RND: 0xCA42, OpKind.DRW: 0xDAB5,
    OpKind.SKP: 0xEA9E, OpKind.SKNP: 0xEAA1, OpKind.LD_VX_DT: 0xFA07,
    OpKind.LD_VX_K: 0xFA0A, OpKind.LD_DT_VX: 0xFA15, OpKind.LD_ST_VX: 0xFA18,
    OpKind.ADD_I: 0xFA1E, OpKind.LD_F: 0xFA29, OpKind.LD_B: 0xFA33,
    OpKind.LD_MEM_VX: 0xFA55, OpKind.LD_VX_MEM: 0xFA65,
}

class TestDecoder:
    # @intent:test_case_totality 全ての命令種別が実行表と書式表に登録されていることを検証します。
    def test_every_kind_is_dispatched(self):
        assert len(OpKind) == 35
        assert set(EXECUTE_MAP) == set(OpKind)
        assert set(SYNTAX_MAP) == set(OpKind)
        assert set(REPRESENTATIVE_WORDS) == set(OpKind)

    @pytest.mark.parametrize("kind,word", list(REPRESENTATIVE_WORDS.items()))
    def test_representative_words(self, kind, word):
        assert decode_opcode(word).kind is kind

    # @intent:test_case_fields ビットフィールドが正しく抽出されることを検証します。
    def test_fields(self):
        op = decode_opcode(0xD12F, 0x208)
        assert (op.x, op.y, op.n) == (0x1, 0x2, 0xF)
        assert op.kk == 0x2F
        assert op.nnn == 0x12F
        assert op.word == 0xD12F
        assert op.opcode_hex == "D12F"
        assert op.length == 2

    def test_mnemonic_and_operands(self):
        op = decode_opcode(0x6A05)
        assert op.mnemonic == "LD"
        assert op.operands == ["VA", "#05"]
        assert decode_opcode(0xD125).operands == ["V1", "V2", "5"]
        assert decode_opcode(0x2ABC).operands == ["#ABC"]
        assert decode_opcode(0xF355).operands == ["[I]", "V3"]

    # @intent:test_case_group0 グループ0の 00E0/00EE 以外はSYSとして扱われることを検証します。
    @pytest.mark.parametrize("word", [0x0000, 0x0123, 0x00E1, 0x0FFF])
    def test_group0_defaults_to_sys(self, word):
        assert lookup_kind(word) is OpKind.SYS

    # @intent:test_case_unknown どの命令にも一致しない語がUnknownOpcodeになることを検証します。
    @pytest.mark.parametrize("word", [0x5121, 0x912F, 0x8128, 0x812F, 0xE100, 0xE19F, 0xF100, 0xF1FF])
    def test_unknown_words(self, word):
        assert lookup_kind(word) is None
        with pytest.raises(UnknownOpcode) as exc_info:
            decode_opcode(word, 0x2A0)
        assert exc_info.value.word == word
        assert exc_info.value.address == 0x2A0
        assert f"{word:04X}" in str(exc_info.value)

    def test_every_word_decodes_or_raises(self):
        for word in range(0x10000):
            kind = lookup_kind(word)
            if kind is None:
                with pytest.raises(UnknownOpcode):
                    decode_opcode(word)
            else:
                assert decode_opcode(word).kind is kind
