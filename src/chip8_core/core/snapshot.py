# chip8_core/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクルの結果（実行された命令、バスアクセス、障害）を記録した
不変のデータ構造を定義します。UIへの情報提供と、テスト時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_core.core.state import CpuState
from chip8_core.core.errors import MachineFault
from chip8_core.transport.bus import BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（オペコード、ニーモニック、オペランド、実行パターン）を記録するデータクラス。
    """
    opcode: int # 例: 0x8014
    mnemonic: str # 例: "ADD"
    operands: List[str] = field(default_factory=list) # 例: ["V0", "V1"]
    pattern: str = "" # 実行テーブルのキー。例: "8XY4"
    cycle_count: int = 1
    length: int = 2 # 命令のバイト長

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    # @intent:accessor オペコードのニブル・即値フィールドへのアクセサ。
    @property
    def x(self) -> int:
        return (self.opcode >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.opcode >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.opcode & 0xF

    @property
    def nn(self) -> int:
        return self.opcode & 0xFF

    @property
    def nnn(self) -> int:
        return self.opcode & 0xFFF

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、命令の表記など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "ADD V0, V1"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1回のstepの結果を記録した不変のデータ構造。
    operationは命令が実行されなかった場合（halted/waiting、フェッチ障害）はNoneになります。
    """
    state: CpuState
    operation: Optional[Operation]
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
    fault: Optional[MachineFault] = None

    # @intent:responsibility このstepで命令が実行されたかどうかを返します。
    @property
    def executed(self) -> bool:
        return self.operation is not None and self.fault is None
