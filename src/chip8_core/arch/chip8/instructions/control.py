# src/chip8_core/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ、キー待ち）の実装。
"""
import logging
from random import Random

from chip8_core.core.errors import IllegalInstruction
from chip8_core.core.snapshot import Operation
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState
from .base import vreg, addr_operand, imm_operand, skip_next, push_return, pop_return

logger = logging.getLogger(__name__)

# --- 0 family ---
# @intent:responsibility 00E0 / 00EE / 0NNN をデコードします。
def decode_family_0(opcode: int) -> Operation:
    if opcode == 0x00E0:
        return Operation(opcode, "CLS", [], "00E0")
    if opcode == 0x00EE:
        return Operation(opcode, "RET", [], "00EE")
    return Operation(opcode, "SYS", [addr_operand(opcode & 0xFFF)], "0NNN")

# @intent:responsibility RET命令を実行し、スタックから戻りアドレスを取り出してPCに設定します。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.pc = pop_return(state)

# @intent:responsibility SYS命令をサブルーチン呼び出しとして実行します（レガシー互換の挙動）。
def execute_sys(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    execute_call(state, bus, op, rng)

# --- JP / CALL ---
def decode_jp(opcode: int) -> Operation:
    return Operation(opcode, "JP", [addr_operand(opcode & 0xFFF)], "1NNN")

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.pc = op.nnn

def decode_call(opcode: int) -> Operation:
    return Operation(opcode, "CALL", [addr_operand(opcode & 0xFFF)], "2NNN")

# @intent:responsibility CALL命令を実行し、戻りアドレスをスタックに積んでからジャンプします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    # state.pcはstepで既に次の命令を指している
    push_return(state, state.pc)
    state.pc = op.nnn

def decode_jp_v0(opcode: int) -> Operation:
    return Operation(opcode, "JP", ["V0", addr_operand(opcode & 0xFFF)], "BNNN")

def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    # 範囲外になった場合は次のフェッチでOutOfBoundsFetchとなる
    state.pc = state.v[0] + op.nnn

# --- Conditional skips ---
def decode_se_imm(opcode: int) -> Operation:
    return Operation(opcode, "SE", [vreg((opcode >> 8) & 0xF), imm_operand(opcode & 0xFF)], "3XNN")

def execute_se_imm(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.v[op.x] == op.nn:
        skip_next(state)

def decode_sne_imm(opcode: int) -> Operation:
    return Operation(opcode, "SNE", [vreg((opcode >> 8) & 0xF), imm_operand(opcode & 0xFF)], "4XNN")

def execute_sne_imm(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.v[op.x] != op.nn:
        skip_next(state)

def decode_se_reg(opcode: int) -> Operation:
    if opcode & 0xF:
        raise IllegalInstruction(f"Unknown 5XY_ variant ${opcode:04X}.", opcode=opcode)
    return Operation(opcode, "SE", [vreg((opcode >> 8) & 0xF), vreg((opcode >> 4) & 0xF)], "5XY0")

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.v[op.x] == state.v[op.y]:
        skip_next(state)

def decode_sne_reg(opcode: int) -> Operation:
    if opcode & 0xF:
        raise IllegalInstruction(f"Unknown 9XY_ variant ${opcode:04X}.", opcode=opcode)
    return Operation(opcode, "SNE", [vreg((opcode >> 8) & 0xF), vreg((opcode >> 4) & 0xF)], "9XY0")

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.v[op.x] != state.v[op.y]:
        skip_next(state)

# --- Key input ---
# @intent:responsibility EX9E / EXA1 をデコードします。
def decode_family_e(opcode: int) -> Operation:
    x = vreg((opcode >> 8) & 0xF)
    if opcode & 0xFF == 0x9E:
        return Operation(opcode, "SKP", [x], "EX9E")
    if opcode & 0xFF == 0xA1:
        return Operation(opcode, "SKNP", [x], "EXA1")
    raise IllegalInstruction(f"Unknown EX__ variant ${opcode:04X}.", opcode=opcode)

# @intent:rationale キーの比較はキー番号（0x0-0xF）で行う。VXの下位4ビットをキー番号とみなす。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.keypad.is_pressed(state.v[op.x]):
        skip_next(state)

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if not state.keypad.is_pressed(state.v[op.x]):
        skip_next(state)

# @intent:responsibility FX0Aを実行し、キー解放待ち（Waiting）状態に遷移します。
# @intent:post-condition 待ちの解除はChip8Cpu.lift_keyでのみ行われます。
def execute_wait_key(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.waiting_register = op.x
    logger.info("Waiting for key release into %s", vreg(op.x))
