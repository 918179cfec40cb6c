from dataclasses import dataclass, field
from typing import Dict, Optional

from chip8_core.arch.chip8.timers import TIMER_HZ

# @intent:constant 一般的な 1234/QWER/ASDF/ZXCV 配列のキー割り当て。
DEFAULT_KEY_MAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class ColorConfig:
    foreground: str = "#33FF66"
    background: str = "#101010"

@dataclass
class MachineConfig:
    instructions_per_second: int = 700
    timer_hz: int = TIMER_HZ
    scale: int = 10
    font: bool = True
    rng_seed: Optional[int] = None
    key_map: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))
    colors: ColorConfig = field(default_factory=ColorConfig)
