# src/chip8_core/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。
8XY_ 系の命令は結果をVXに書き込んだ後にVFを設定します（X=Fの場合はフラグが優先）。
"""
from random import Random

from chip8_core.core.errors import IllegalInstruction
from chip8_core.core.snapshot import Operation
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState
from .base import vreg, imm_operand

# --- LD / ADD immediate ---
def decode_ld_imm(opcode: int) -> Operation:
    return Operation(opcode, "LD", [vreg((opcode >> 8) & 0xF), imm_operand(opcode & 0xFF)], "6XNN")

def execute_ld_imm(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = op.nn

def decode_add_imm(opcode: int) -> Operation:
    return Operation(opcode, "ADD", [vreg((opcode >> 8) & 0xF), imm_operand(opcode & 0xFF)], "7XNN")

# @intent:responsibility 7XNN: キャリーフラグを変更せずに加算します。
def execute_add_imm(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = (state.v[op.x] + op.nn) & 0xFF

# --- 8XY_ ---
# @intent:map 8XY_ の下位ニブルからニーモニックへの対応。
_FAMILY_8 = {
    0x0: "LD",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}

# @intent:responsibility 8XY_ 系の命令をデコードします。
def decode_family_8(opcode: int) -> Operation:
    variant = opcode & 0xF
    mnemonic = _FAMILY_8.get(variant)
    if mnemonic is None:
        raise IllegalInstruction(f"Unknown 8XY_ variant ${opcode:04X}.", opcode=opcode)
    operands = [vreg((opcode >> 8) & 0xF), vreg((opcode >> 4) & 0xF)]
    return Operation(opcode, mnemonic, operands, f"8XY{variant:X}")

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = state.v[op.y]

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] |= state.v[op.y]

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] &= state.v[op.y]

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] ^= state.v[op.y]

# @intent:responsibility 8XY4: 加算し、桁あふれ(>255)をVFに設定します。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    total = state.v[op.x] + state.v[op.y]
    state.v[op.x] = total & 0xFF
    state.vf = 1 if total > 0xFF else 0

# @intent:responsibility 8XY5: VX - VY。ボローなし(VX >= VY)のときVF=1。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    vx, vy = state.v[op.x], state.v[op.y]
    state.v[op.x] = (vx - vy) & 0xFF
    state.vf = 1 if vx >= vy else 0

def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    vx = state.v[op.x]
    state.v[op.x] = vx >> 1
    state.vf = vx & 0x01

# @intent:responsibility 8XY7: VY - VX。ボローなし(VY >= VX)のときVF=1。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    vx, vy = state.v[op.x], state.v[op.y]
    state.v[op.x] = (vy - vx) & 0xFF
    state.vf = 1 if vy >= vx else 0

def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    vx = state.v[op.x]
    state.v[op.x] = (vx << 1) & 0xFF
    state.vf = (vx >> 7) & 0x01

# --- RND ---
def decode_rnd(opcode: int) -> Operation:
    return Operation(opcode, "RND", [vreg((opcode >> 8) & 0xF), imm_operand(opcode & 0xFF)], "CXNN")

# @intent:responsibility CXNN: 一様乱数バイトとNNの論理積をVXに格納します。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = rng.randrange(256) & op.nn
