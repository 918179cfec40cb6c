# src/chip8_core/arch/chip8/cpu.py
"""
CHIP-8 仮想マシンの中心モジュール。

命令サイクル（フェッチ、デコード、実行）、プログラムのロード、タイマーのティック、
キー入力の受け付けを提供します。ホストはこのクラスの公開メソッドのみを呼び出します。
"""
import logging
from random import Random
from typing import Dict, List, Optional

from chip8_core.common.types import PixelRows, RegisterLayoutInfo, RegisterInfo
from chip8_core.core.cpu import AbstractCpu, FaultHandler
from chip8_core.core.errors import MachineFault, OutOfBoundsFetch, ProgramTooLarge
from chip8_core.core.snapshot import Operation, Snapshot
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8 import timers
from chip8_core.arch.chip8.font import FONT_DATA, FONT_START
from chip8_core.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_core.arch.chip8.instructions.base import read_word, vreg
from chip8_core.arch.chip8.state import (
    Chip8CpuState, RunState, MEMORY_SIZE, PROGRAM_START, PROGRAM_AREA, REGISTER_COUNT,
)

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8の具体的なエミュレーションロジックとホスト向けの公開インターフェースを提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 仮想マシン。

    状態機械: Running → Waiting (FX0A) → Running (キー解放)
              Running → Halted (致命的な障害)。Haltedはreset()まで終端状態です。
    """
    # @intent:pre-condition busには0x000-0xFFFの4096バイトがマップされている必要があります。
    # @intent:responsibility rngとon_faultはホストから注入される協調オブジェクトです。
    def __init__(self, bus: Bus, rng: Optional[Random] = None, load_font: bool = True,
                 on_fault: Optional[FaultHandler] = None):
        self._rng = rng if rng is not None else Random()
        self._load_font = load_font
        super().__init__(bus, on_fault)
        self._power_on_memory()

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility 全ての状態を電源投入時の値に戻します。実行中のプログラムと待機状態は破棄されます。
    def reset(self) -> None:
        super().reset()
        self._power_on_memory()
        logger.debug("Machine reset")

    # @intent:responsibility メモリをゼロで埋め、必要であれば組み込みフォントを予約領域に配置します。
    def _power_on_memory(self) -> None:
        self._bus.load(0x000, bytes(MEMORY_SIZE))
        if self._load_font:
            self._bus.load(FONT_START, FONT_DATA)

    # @intent:responsibility プログラムをメモリの0x200以降にコピーし、PCを0x200に設定します。
    # @intent:pre-condition プログラムは3584バイト以下である必要があります。超える場合は状態を変更せずに拒否します。
    def load_program(self, data: bytes) -> None:
        """
        ヘッダのない生のバイナリをそのまま0x200にロードします。
        その他の状態は変更しません（クリーンな状態が必要な場合は先にreset()を呼び出してください）。
        """
        data = bytes(memoryview(data))
        if len(data) > PROGRAM_AREA:
            raise ProgramTooLarge(len(data), PROGRAM_AREA)
        self._bus.load(PROGRAM_START, data)
        self._state.pc = PROGRAM_START
        logger.debug("Loaded %d byte program at $%03X", len(data), PROGRAM_START)

    # @intent:responsibility 60Hzのティックで両タイマーを1ずつ減らします。
    def timer_tick(self) -> None:
        timers.tick(self._state)

    def press_key(self, key_id: int) -> None:
        self._state.keypad.press(key_id)

    # @intent:responsibility キー解放を記録し、待機中であれば待機を一度だけ解除します。
    # @intent:post-condition 待機中の場合、VX = 解放されたキー番号となり、次のstepから通常実行に戻ります。
    def lift_key(self, key_id: int) -> None:
        if not self._state.keypad.lift(key_id):
            return
        register = self._state.waiting_register
        if register is None:
            return
        self._state.v[register] = key_id
        self._state.waiting_register = None
        logger.info("Key %X released, resuming with %s=%d", key_id, vreg(register), key_id)

    # @intent:responsibility 2バイトのオペコードをフェッチします。先頭バイトが上位バイトです。
    # @intent:pre-condition PCは偶数で、PCとPC+1がメモリ内にある必要があります。そうでなければOutOfBoundsFetchを送出します。
    def _fetch(self) -> int:
        pc = self._state.pc
        if pc >= MEMORY_SIZE or pc + 1 >= MEMORY_SIZE:
            raise OutOfBoundsFetch(f"Program counter ${pc:04X} is outside memory.", address=pc)
        if pc & 1:
            raise OutOfBoundsFetch(f"Program counter ${pc:04X} is not aligned to an instruction.", address=pc)
        return read_word(self._bus, pc)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._rng)

    # @intent:responsibility haltedまたは待機中は命令を実行せず、その状態のSnapshotを返します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if self._state.waiting_register is not None:
            return self._create_snapshot(current_pc, None)
        return super()._handle_halt(current_pc)

    def _can_run(self) -> bool:
        return self._state.run_state is RunState.RUNNING

    def _raise_fault(self, fault: MachineFault) -> None:
        self._state.fault = fault
        super()._raise_fault(fault)

    # --- 読み出し専用アクセサ ---
    # @intent:responsibility ホストの描画用にフレームバッファの不変コピーを返します。
    def get_framebuffer(self) -> PixelRows:
        return self._state.framebuffer.snapshot()

    # @intent:responsibility 前回の呼び出し以降に画面が変化したかを返し、変更フラグをクリアします。
    def consume_frame_dirty(self) -> bool:
        framebuffer = self._state.framebuffer
        dirty = framebuffer.dirty
        framebuffer.dirty = False
        return dirty

    def read_memory(self, address: int) -> int:
        return self._bus.peek(address)

    @property
    def sound_timer(self) -> int:
        return self._state.sound_timer

    # @intent:responsibility ホストが「音を鳴らすべきか」を判断するための値です。
    @property
    def sound_active(self) -> bool:
        return self._state.sound_timer > 0

    @property
    def waiting(self) -> bool:
        return self._state.waiting_register is not None

    @property
    def run_state(self) -> RunState:
        return self._state.run_state

    @property
    def fault(self) -> Optional[MachineFault]:
        return self._state.fault

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {vreg(index): s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(vreg(index), 8) for index in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]
