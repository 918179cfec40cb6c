# src/chip8_core/arch/chip8/instructions/display.py
"""
画面命令（消去、スプライト描画）の実装。
ここではフレームバッファのビットマップを更新するだけで、実際の描画はホストが行います。
"""
from random import Random

from chip8_core.core.errors import IndexOutOfBounds
from chip8_core.core.snapshot import Operation
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState, MEMORY_SIZE
from .base import vreg

# @intent:responsibility CLS命令を実行し、フレームバッファを全て消去します。
def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.framebuffer.clear()

def decode_drw(opcode: int) -> Operation:
    operands = [vreg((opcode >> 8) & 0xF), vreg((opcode >> 4) & 0xF), f"{opcode & 0xF}"]
    return Operation(opcode, "DRW", operands, "DXYN")

# @intent:responsibility DXYN: Iから読んだNバイトのスプライトを(VX, VY)にXOR描画し、衝突をVFに設定します。
# @intent:pre-condition スプライトの全ての行がメモリ内に収まっている必要があります。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.i + op.n > MEMORY_SIZE:
        raise IndexOutOfBounds(f"Sprite of {op.n} rows at ${state.i:03X} runs past the end of memory.")
    rows = bytes(bus.read(state.i + row) for row in range(op.n))
    collided = state.framebuffer.draw_sprite(state.v[op.x], state.v[op.y], rows)
    state.vf = 1 if collided else 0
