from random import Random
from typing import Optional, Tuple
from chip8_core.transport.bus import Bus, RAM
from chip8_core.core.cpu import FaultHandler
from chip8_core.arch.chip8.cpu import Chip8Cpu
from chip8_core.arch.chip8.state import MEMORY_SIZE
from .models import MachineConfig

# @intent:responsibility マシン構成（Config）に基づいて、Bus、RAM、CPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: MachineConfig,
                     on_fault: Optional[FaultHandler] = None) -> Tuple[Chip8Cpu, Bus]:
        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

        # @intent:rationale シードが指定された場合のみ決定的な乱数列を使う（テストや再現用）。
        rng = Random(config.rng_seed) if config.rng_seed is not None else Random()
        cpu = Chip8Cpu(bus, rng=rng, load_font=config.font, on_fault=on_fault)
        return cpu, bus
