# src/chip8_core/arch/chip8/state.py
"""
CHIP-8 仮想マシン固有の状態定義。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from chip8_core.core.state import CpuState
from chip8_core.core.errors import MachineFault
from chip8_core.arch.chip8.framebuffer import FrameBuffer
from chip8_core.arch.chip8.keypad import InputLatch

# @intent:constant メモリマップと資源の上限。
MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
PROGRAM_AREA = MEMORY_SIZE - PROGRAM_START  # 3584 bytes
REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF

# @intent:responsibility 実行状態機械の状態を定義します。
class RunState(Enum):
    RUNNING = "Running"
    WAITING = "Waiting"
    HALTED = "Halted"

# @intent:responsibility CHIP-8の全てのレジスタ、スタック、タイマー、画面、キー状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8のマシン状態を保持するデータクラス。
    メモリ本体はBus上のRAMデバイスが保持します。
    spはスタックに積まれている戻りアドレスの数（0〜16）です。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)  # V0-VF
    i: int = 0x0000  # Index Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0
    framebuffer: FrameBuffer = field(default_factory=FrameBuffer)
    keypad: InputLatch = field(default_factory=InputLatch)
    waiting_register: Optional[int] = None
    fault: Optional[MachineFault] = None

    # @intent:accessor フラグレジスタ(VF)へのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    @property
    def run_state(self) -> RunState:
        if self.halted:
            return RunState.HALTED
        if self.waiting_register is not None:
            return RunState.WAITING
        return RunState.RUNNING
