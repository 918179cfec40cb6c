"""
CHIP-8命令セット実装パッケージ。
"""
from random import Random

from chip8_core.transport.bus import Bus
from chip8_core.core.errors import IllegalInstruction
from chip8_core.core.snapshot import Operation
from chip8_core.arch.chip8.state import Chip8CpuState
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility 与えられた16ビットのオペコードをCHIP-8の命令としてデコードします。
# @intent:post-condition 該当する命令がない場合はIllegalInstructionを送出します。
def decode_opcode(opcode: int) -> Operation:
    """
    上位ニブルで命令ファミリーを選び、Operationオブジェクトを返します。
    """
    decoder = DECODE_MAP.get((opcode >> 12) & 0xF)
    if decoder is None:
        raise IllegalInstruction(f"No decoder for opcode ${opcode:04X}.", opcode=opcode)
    return decoder(opcode)

# @intent:responsibility デコードされたCHIP-8命令を実行し、マシンの状態を変更します。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, rng: Random) -> None:
    executor = EXECUTE_MAP.get(operation.pattern)
    if executor is None:
        raise IllegalInstruction(f"No handler for pattern {operation.pattern!r}.", opcode=operation.opcode)
    executor(state, bus, operation, rng)
