# src/chip8_core/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from . import load
from . import alu
from . import control
from . import display

# @intent:map オペコード上位ニブルからデコード関数へのマッピングテーブル。
DECODE_MAP = {
    0x0: control.decode_family_0,
    0x1: control.decode_jp,
    0x2: control.decode_call,
    0x3: control.decode_se_imm,
    0x4: control.decode_sne_imm,
    0x5: control.decode_se_reg,
    0x6: alu.decode_ld_imm,
    0x7: alu.decode_add_imm,
    0x8: alu.decode_family_8,
    0x9: control.decode_sne_reg,
    0xA: load.decode_ld_i,
    0xB: control.decode_jp_v0,
    0xC: alu.decode_rnd,
    0xD: display.decode_drw,
    0xE: control.decode_family_e,
    0xF: load.decode_family_f,
}

# @intent:map 命令パターンから実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    "00EE": control.execute_ret,
    "0NNN": control.execute_sys,
    "1NNN": control.execute_jp,
    "2NNN": control.execute_call,
    "3XNN": control.execute_se_imm,
    "4XNN": control.execute_sne_imm,
    "5XY0": control.execute_se_reg,
    "9XY0": control.execute_sne_reg,
    "BNNN": control.execute_jp_v0,
    "EX9E": control.execute_skp,
    "EXA1": control.execute_sknp,
    "FX0A": control.execute_wait_key,

    # ALU
    "6XNN": alu.execute_ld_imm,
    "7XNN": alu.execute_add_imm,
    "8XY0": alu.execute_ld_reg,
    "8XY1": alu.execute_or,
    "8XY2": alu.execute_and,
    "8XY3": alu.execute_xor,
    "8XY4": alu.execute_add_reg,
    "8XY5": alu.execute_sub,
    "8XY6": alu.execute_shr,
    "8XY7": alu.execute_subn,
    "8XYE": alu.execute_shl,
    "CXNN": alu.execute_rnd,

    # Load
    "ANNN": load.execute_ld_i,
    "FX07": load.execute_ld_vx_dt,
    "FX15": load.execute_ld_dt_vx,
    "FX18": load.execute_ld_st_vx,
    "FX1E": load.execute_add_i,
    "FX29": load.execute_ld_font,
    "FX33": load.execute_bcd,
    "FX55": load.execute_store_regs,
    "FX65": load.execute_load_regs,

    # Display
    "00E0": display.execute_cls,
    "DXYN": display.execute_drw,
}
