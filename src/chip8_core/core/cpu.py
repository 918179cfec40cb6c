# chip8_core/core/cpu.py
"""
Core Layer (命令サイクル)

フェッチ・デコード・実行の順序と、致命的な障害の捕捉・通知を一箇所にまとめます。
命令ごとの効果はアーキテクチャ側（arch/）のサブクラスと命令テーブルが実装します。
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from chip8_core.transport.bus import Bus
from chip8_core.core.errors import MachineFault
from chip8_core.core.snapshot import Snapshot, Operation, Metadata
from chip8_core.core.state import CpuState
from chip8_core.common.types import RegisterLayoutInfo

logger = logging.getLogger(__name__)

FaultHandler = Callable[[MachineFault], None]

# @intent:responsibility 命令サイクルのテンプレートと、ホストに見せる共通の操作を定義します。
class AbstractCpu(ABC):
    """
    サブクラスは状態の生成とフェッチ・デコード・実行の3段階を実装します。
    状態はget_state()経由でのみ公開し、ホストが直接書き換えることは想定しません。
    """
    # @intent:constant フェッチ1回で読み出す命令語のバイト数。デコード前にPCをこの分だけ進める。
    INSTRUCTION_LENGTH = 2

    # @intent:pre-condition busには命令とデータを置くメモリが登録済みである必要があります。
    # @intent:responsibility on_faultはホストから注入される障害通知先です（グローバルな通知経路は持ちません）。
    def __init__(self, bus: Bus, on_fault: Optional[FaultHandler] = None):
        self._bus = bus
        self._on_fault = on_fault
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """電源投入直後の状態を新しく生成します。reset()のたびに呼ばれます。"""

    # @intent:responsibility 状態を新しく作り直し、実行済み命令数も0に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        return self._state

    @property
    def halted(self) -> bool:
        return self._state.halted

    # @intent:accessor reset以降に完了した命令の数。障害で中断した命令は数えない。
    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCにある命令語を読み出します。PCは変更しません。
        PCがメモリ外の場合はMachineFaultを送出します。
        """

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        """命令語をOperationに変換します。該当する命令がなければMachineFaultを送出します。"""

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        """Operationの効果を状態とメモリに適用します。PCはデコード前に次の命令を指すよう進められています。"""

    # @intent:responsibility 1命令を実行し、その結果をSnapshotとして返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→停止判定→フェッチ→PC更新→デコード→実行→Snapshot生成）を定義します。
    def step(self) -> Snapshot:
        """
        障害は例外として呼び出し元に伝播せず、CPUをhaltedにしたうえで
        Snapshot.faultとon_faultで通知します。
        """
        self._bus.get_and_clear_activity_log()
        pc_before = self._state.pc

        idle = self._handle_halt(pc_before)
        if idle:
            return idle

        opcode: Optional[int] = None
        operation: Optional[Operation] = None
        try:
            opcode = self._fetch()
            self._update_pc()
            operation = self._decode(opcode)
            self._execute(operation)
        except MachineFault as fault:
            self._raise_fault(fault.with_context(pc_before, opcode))
            return self._create_snapshot(pc_before, operation, fault)

        return self._create_snapshot(pc_before, operation)

    # @intent:responsibility 最大count命令を連続実行し、最後のSnapshotを返します。
    # @intent:post-condition haltedまたは待機状態に入った時点で早期に終了します。1命令も実行しなければNone。
    def run_for(self, count: int) -> Optional[Snapshot]:
        snapshot = None
        for _ in range(count):
            if not self._can_run():
                break
            snapshot = self.step()
        return snapshot

    def _can_run(self) -> bool:
        return not self._state.halted

    # @intent:return 命令を実行しない場合はその状態のSnapshot、そうでなければNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if self._state.halted:
            return self._create_snapshot(current_pc, None)
        return None

    # @intent:post-condition 障害の種類によらず、フェッチに成功した命令ではPCが次の命令を指します。
    def _update_pc(self) -> None:
        self._state.pc = (self._state.pc + self.INSTRUCTION_LENGTH) & 0xFFFF

    # @intent:responsibility 致命的な障害を記録し、CPUをhalted状態にしてホストへ通知します。
    def _raise_fault(self, fault: MachineFault) -> None:
        self._state.halted = True
        logger.error("CPU halted: %s", fault)
        if self._on_fault:
            self._on_fault(fault)

    def _create_snapshot(self, initial_pc: int, operation: Optional[Operation],
                         fault: Optional[MachineFault] = None) -> Snapshot:
        activity = self._bus.get_and_clear_activity_log()

        text = None
        if operation is not None:
            if fault is None:
                self._cycle_count += operation.cycle_count
            text = operation.mnemonic
            if operation.operands:
                text += " " + ", ".join(operation.operands)

        # 注: stateはコピーではなく現在の状態への参照です。
        return Snapshot(
            state=self._state,
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=text),
            bus_activity=activity,
            fault=fault,
        )

    # @intent:responsibility UI表示用に、レジスタ名から現在値への辞書を返します。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    # @intent:responsibility UI表示用に、レジスタのグループ分けとビット幅を返します。
    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass
