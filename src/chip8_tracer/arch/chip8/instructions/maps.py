# src/chip8_tracer/arch/chip8/instructions/maps.py
"""
命令語と命令実装のマッピング定義。
"""
from . import alu
from . import control
from . import peripheral
from . import load
from .base import OpKind

# @intent:map 上位ニブルごとに、2次判別子をビットフィールドのどこから取るかを定義します。
# ここに無いグループは上位ニブルだけで命令が確定します。
DISCRIMINATORS = {
    0x0: "nnn",
    0x5: "n",
    0x8: "n",
    0x9: "n",
    0xE: "kk",
    0xF: "kk",
}

# @intent:map (上位ニブル, 判別子) から命令種別へのマッピングテーブル。
# グループ0で 00E0/00EE 以外のものは SYS として扱います（デコーダ側で処理）。
DECODE_MAP = {
    (0x0, 0x0E0): OpKind.CLS,
    (0x0, 0x0EE): OpKind.RET,
    (0x1, None): OpKind.JP,
    (0x2, None): OpKind.CALL,
    (0x3, None): OpKind.SE_BYTE,
    (0x4, None): OpKind.SNE_BYTE,
    (0x5, 0x0): OpKind.SE_REG,
    (0x6, None): OpKind.LD_BYTE,
    (0x7, None): OpKind.ADD_BYTE,
    (0x8, 0x0): OpKind.LD_REG,
    (0x8, 0x1): OpKind.OR,
    (0x8, 0x2): OpKind.AND,
    (0x8, 0x3): OpKind.XOR,
    (0x8, 0x4): OpKind.ADD_REG,
    (0x8, 0x5): OpKind.SUB,
    (0x8, 0x6): OpKind.SHR,
    (0x8, 0x7): OpKind.SUBN,
    (0x8, 0xE): OpKind.SHL,
    (0x9, 0x0): OpKind.SNE_REG,
    (0xA, None): OpKind.LD_I,
    (0xB, None): OpKind.JP_V0,
    (0xC, None): OpKind.RND,
    (0xD, None): OpKind.DRW,
    (0xE, 0x9E): OpKind.SKP,
    (0xE, 0xA1): OpKind.SKNP,
    (0xF, 0x07): OpKind.LD_VX_DT,
    (0xF, 0x0A): OpKind.LD_VX_K,
    (0xF, 0x15): OpKind.LD_DT_VX,
    (0xF, 0x18): OpKind.LD_ST_VX,
    (0xF, 0x1E): OpKind.ADD_I,
    (0xF, 0x29): OpKind.LD_F,
    (0xF, 0x33): OpKind.LD_B,
    (0xF, 0x55): OpKind.LD_MEM_VX,
    (0xF, 0x65): OpKind.LD_VX_MEM,
}

# @intent:map 命令種別からニーモニックとオペランド書式へのマッピングテーブル。
# 書式は split_fields() の結果で str.format されます。
SYNTAX_MAP = {
    OpKind.SYS: ("SYS", ["#{nnn:03X}"]),
    OpKind.CLS: ("CLS", []),
    OpKind.RET: ("RET", []),
    OpKind.JP: ("JP", ["#{nnn:03X}"]),
    OpKind.CALL: ("CALL", ["#{nnn:03X}"]),
    OpKind.SE_BYTE: ("SE", ["V{x:X}", "#{kk:02X}"]),
    OpKind.SNE_BYTE: ("SNE", ["V{x:X}", "#{kk:02X}"]),
    OpKind.SE_REG: ("SE", ["V{x:X}", "V{y:X}"]),
    OpKind.LD_BYTE: ("LD", ["V{x:X}", "#{kk:02X}"]),
    OpKind.ADD_BYTE: ("ADD", ["V{x:X}", "#{kk:02X}"]),
    OpKind.LD_REG: ("LD", ["V{x:X}", "V{y:X}"]),
    OpKind.OR: ("OR", ["V{x:X}", "V{y:X}"]),
    OpKind.AND: ("AND", ["V{x:X}", "V{y:X}"]),
    OpKind.XOR: ("XOR", ["V{x:X}", "V{y:X}"]),
    OpKind.ADD_REG: ("ADD", ["V{x:X}", "V{y:X}"]),
    OpKind.SUB: ("SUB", ["V{x:X}", "V{y:X}"]),
    OpKind.SHR: ("SHR", ["V{x:X}"]),
    OpKind.SUBN: ("SUBN", ["V{x:X}", "V{y:X}"]),
    OpKind.SHL: ("SHL", ["V{x:X}"]),
    OpKind.SNE_REG: ("SNE", ["V{x:X}", "V{y:X}"]),
    OpKind.LD_I: ("LD", ["I", "#{nnn:03X}"]),
    OpKind.JP_V0: ("JP", ["V0", "#{nnn:03X}"]),
    OpKind.RND: ("RND", ["V{x:X}", "#{kk:02X}"]),
    OpKind.DRW: ("DRW", ["V{x:X}", "V{y:X}", "{n:X}"]),
    OpKind.SKP: ("SKP", ["V{x:X}"]),
    OpKind.SKNP: ("SKNP", ["V{x:X}"]),
    OpKind.LD_VX_DT: ("LD", ["V{x:X}", "DT"]),
    OpKind.LD_VX_K: ("LD", ["V{x:X}", "K"]),
    OpKind.LD_DT_VX: ("LD", ["DT", "V{x:X}"]),
    OpKind.LD_ST_VX: ("LD", ["ST", "V{x:X}"]),
    OpKind.ADD_I: ("ADD", ["I", "V{x:X}"]),
    OpKind.LD_F: ("LD", ["F", "V{x:X}"]),
    OpKind.LD_B: ("LD", ["B", "V{x:X}"]),
    OpKind.LD_MEM_VX: ("LD", ["[I]", "V{x:X}"]),
    OpKind.LD_VX_MEM: ("LD", ["V{x:X}", "[I]"]),
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。全ての OpKind を網羅します。
EXECUTE_MAP = {
    # Control
    OpKind.SYS: control.execute_sys,
    OpKind.RET: control.execute_ret,
    OpKind.JP: control.execute_jp,
    OpKind.CALL: control.execute_call,
    OpKind.SE_BYTE: control.execute_se_byte,
    OpKind.SNE_BYTE: control.execute_sne_byte,
    OpKind.SE_REG: control.execute_se_reg,
    OpKind.SNE_REG: control.execute_sne_reg,
    OpKind.JP_V0: control.execute_jp_v0,

    # ALU
    OpKind.ADD_BYTE: alu.execute_add_byte,
    OpKind.OR: alu.execute_or,
    OpKind.AND: alu.execute_and,
    OpKind.XOR: alu.execute_xor,
    OpKind.ADD_REG: alu.execute_add_reg,
    OpKind.SUB: alu.execute_sub,
    OpKind.SHR: alu.execute_shr,
    OpKind.SUBN: alu.execute_subn,
    OpKind.SHL: alu.execute_shl,
    OpKind.RND: alu.execute_rnd,

    # Load/Store
    OpKind.LD_BYTE: load.execute_ld_byte,
    OpKind.LD_REG: load.execute_ld_reg,
    OpKind.LD_I: load.execute_ld_i,
    OpKind.ADD_I: load.execute_add_i,
    OpKind.LD_F: load.execute_ld_f,
    OpKind.LD_B: load.execute_ld_b,
    OpKind.LD_MEM_VX: load.execute_ld_mem_vx,
    OpKind.LD_VX_MEM: load.execute_ld_vx_mem,
    OpKind.LD_VX_DT: load.execute_ld_vx_dt,
    OpKind.LD_DT_VX: load.execute_ld_dt_vx,
    OpKind.LD_ST_VX: load.execute_ld_st_vx,

    # Display/Keypad
    OpKind.CLS: peripheral.execute_cls,
    OpKind.DRW: peripheral.execute_drw,
    OpKind.SKP: peripheral.execute_skp,
    OpKind.SKNP: peripheral.execute_sknp,
    OpKind.LD_VX_K: peripheral.execute_ld_vx_k,
}
