# chip8_core/core/errors.py
"""
Core Layer (障害の分類)

仮想マシンの実行中・ロード時に発生する障害を定義します。
MachineFaultの派生は致命的（halted状態へ遷移）であり、ProgramTooLargeのみ非致命的です。
"""
from enum import Enum
from typing import Optional

# @intent:responsibility 障害の種別をホストが判別できる値として定義します。
class FaultKind(Enum):
    OUT_OF_BOUNDS_FETCH = "OutOfBoundsFetch"
    STACK_OVERFLOW = "StackOverflow"
    STACK_UNDERFLOW = "StackUnderflow"
    ILLEGAL_INSTRUCTION = "IllegalInstruction"
    INDEX_OUT_OF_BOUNDS = "IndexOutOfBounds"
    PROGRAM_TOO_LARGE = "ProgramTooLarge"

# @intent:responsibility 本パッケージが送出する全ての例外の基底クラス。
class Chip8Error(Exception):
    kind: FaultKind

# @intent:responsibility 命令実行を停止させる致命的な障害（種別 + コンテキスト）を表します。
class MachineFault(Chip8Error):
    """
    致命的な障害。stepの中で捕捉され、CPUはhalted状態になります。

    address: 障害を起こした命令の先頭アドレス（フェッチ前のPC）
    opcode: 障害を起こしたオペコード（フェッチ前の障害ではNone）
    """
    def __init__(self, message: str, address: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.address = address
        self.opcode = opcode

    # @intent:responsibility 命令ハンドラでは不明なコンテキスト（アドレス・オペコード）を後から補完します。
    def with_context(self, address: int, opcode: Optional[int]) -> "MachineFault":
        if self.address is None:
            self.address = address
        if self.opcode is None:
            self.opcode = opcode
        return self

    def __str__(self) -> str:
        text = f"{self.kind.value}: {self.message}"
        if self.address is not None:
            text += f" (pc=${self.address:03X}"
            if self.opcode is not None:
                text += f", opcode=${self.opcode:04X}"
            text += ")"
        return text

class OutOfBoundsFetch(MachineFault):
    kind = FaultKind.OUT_OF_BOUNDS_FETCH

class StackOverflow(MachineFault):
    kind = FaultKind.STACK_OVERFLOW

class StackUnderflow(MachineFault):
    kind = FaultKind.STACK_UNDERFLOW

class IllegalInstruction(MachineFault):
    kind = FaultKind.ILLEGAL_INSTRUCTION

class IndexOutOfBounds(MachineFault):
    kind = FaultKind.INDEX_OUT_OF_BOUNDS

# @intent:responsibility ロード時に拒否されたプログラムを表します。状態は変更されません。
class ProgramTooLarge(Chip8Error):
    kind = FaultKind.PROGRAM_TOO_LARGE

    def __init__(self, size: int, limit: int):
        super().__init__(f"Program of {size} bytes exceeds the {limit} byte program area.")
        self.size = size
        self.limit = limit
