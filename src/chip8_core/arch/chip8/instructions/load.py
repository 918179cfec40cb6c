# src/chip8_core/arch/chip8/instructions/load.py
"""
転送命令（インデックスレジスタ、タイマー、メモリ転送）の実装。
"""
from random import Random

from chip8_core.core.errors import IllegalInstruction
from chip8_core.core.snapshot import Operation
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState
from chip8_core.arch.chip8.font import FONT_START, GLYPH_SIZE
from .base import vreg, addr_operand, check_index_range

# --- LD I ---
def decode_ld_i(opcode: int) -> Operation:
    return Operation(opcode, "LD", ["I", addr_operand(opcode & 0xFFF)], "ANNN")

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.i = op.nnn

# --- F family ---
# @intent:map FX__ の下位バイトから (ニーモニック, オペランド表記) への対応。
_FAMILY_F = {
    0x07: ("LD", "{x}, DT"),
    0x0A: ("LD", "{x}, K"),
    0x15: ("LD", "DT, {x}"),
    0x18: ("LD", "ST, {x}"),
    0x1E: ("ADD", "I, {x}"),
    0x29: ("LD", "F, {x}"),
    0x33: ("LD", "B, {x}"),
    0x55: ("LD", "[I], {x}"),
    0x65: ("LD", "{x}, [I]"),
}

# @intent:responsibility FX__ 系の命令をデコードします。
def decode_family_f(opcode: int) -> Operation:
    variant = opcode & 0xFF
    entry = _FAMILY_F.get(variant)
    if entry is None:
        raise IllegalInstruction(f"Unknown FX__ variant ${opcode:04X}.", opcode=opcode)
    mnemonic, template = entry
    operands = template.format(x=vreg((opcode >> 8) & 0xF)).split(", ")
    return Operation(opcode, mnemonic, operands, f"FX{variant:02X}")

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = state.delay_timer

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.delay_timer = state.v[op.x]

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.sound_timer = state.v[op.x]

def execute_add_i(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF

# @intent:responsibility FX29: VXの値に対応するグリフのアドレスをIに設定します。
def execute_ld_font(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.i = FONT_START + state.v[op.x] * GLYPH_SIZE

# @intent:responsibility FX33: VXを10進3桁に分解し、I, I+1, I+2 に格納します。
def execute_bcd(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    check_index_range(state, 2)
    value = state.v[op.x]
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# @intent:responsibility FX55: V0..VX をIから始まるメモリに格納し、IをX+1進めます。
def execute_store_regs(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    check_index_range(state, op.x)
    for index in range(op.x + 1):
        bus.write(state.i + index, state.v[index])
    state.i = (state.i + op.x + 1) & 0xFFFF

# @intent:responsibility FX65: Iから始まるメモリを V0..VX に読み込み、IをX+1進めます。
def execute_load_regs(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    check_index_range(state, op.x)
    for index in range(op.x + 1):
        state.v[index] = bus.read(state.i + index)
    state.i = (state.i + op.x + 1) & 0xFFFF
