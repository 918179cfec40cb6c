# src/chip8_core/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
from chip8_core.transport.bus import Bus
from chip8_core.core.errors import StackOverflow, StackUnderflow, IndexOutOfBounds
from chip8_core.arch.chip8.state import Chip8CpuState, MEMORY_SIZE, STACK_DEPTH

# @intent:utility_function バスから16ビットワードをビッグエンディアン形式で読み込みます。
def read_word(bus: Bus, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read(addr) << 8) | bus.read(addr + 1)

# @intent:utility_function レジスタ番号を表記用の名前に変換します。
def vreg(index: int) -> str:
    return f"V{index:X}"

def addr_operand(value: int) -> str:
    return f"${value:03X}"

def imm_operand(value: int) -> str:
    return f"#${value:02X}"

# @intent:utility_function 次の命令をスキップします（PCを1命令分進める）。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

# @intent:utility_function 戻りアドレスをスタックに積みます。
# @intent:pre-condition スタックに空きがない場合はStackOverflowを送出し、状態を変更しません。
def push_return(state: Chip8CpuState, address: int) -> None:
    if state.sp >= STACK_DEPTH:
        raise StackOverflow(f"Call depth exceeds {STACK_DEPTH} nested calls.")
    state.stack[state.sp] = address
    state.sp += 1

# @intent:utility_function スタックから戻りアドレスを取り出します。
def pop_return(state: Chip8CpuState) -> int:
    if state.sp == 0:
        raise StackUnderflow("Return with an empty call stack.")
    state.sp -= 1
    return state.stack[state.sp]

# @intent:utility_function Iを起点とする last_offset までのアクセスがメモリ内に収まるか検証します。
def check_index_range(state: Chip8CpuState, last_offset: int) -> None:
    if state.i + last_offset >= MEMORY_SIZE:
        raise IndexOutOfBounds(
            f"Access to ${state.i:03X}+{last_offset} runs past the end of memory."
        )
