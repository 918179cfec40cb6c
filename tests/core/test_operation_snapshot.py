# tests/core/test_operation_snapshot.py
"""
chip8_core.core.snapshot と chip8_core.core.errors の単体テスト。
"""
import pytest

from chip8_core.core.state import CpuState
from chip8_core.core.errors import (
    FaultKind, OutOfBoundsFetch, StackOverflow, StackUnderflow, IllegalInstruction,
    IndexOutOfBounds, ProgramTooLarge, MachineFault, Chip8Error,
)
from chip8_core.core.snapshot import Operation, Metadata, Snapshot

class TestOperation:
    # @intent:test_case_fields オペコードのニブル・即値フィールドが正しく取り出されることを検証します。
    def test_field_accessors(self):
        op = Operation(0xD12F, "DRW", ["V1", "V2", "15"], "DXYN")
        assert op.opcode_hex == "D12F"
        assert op.x == 0x1
        assert op.y == 0x2
        assert op.n == 0xF
        assert op.nn == 0x2F
        assert op.nnn == 0x12F
        assert op.length == 2

    def test_operation_immutability(self):
        op = Operation(0x00E0, "CLS")
        with pytest.raises(AttributeError):
            op.mnemonic = "RET"

class TestSnapshot:
    def test_idle_snapshot_is_not_executed(self):
        snapshot = Snapshot(state=CpuState(), operation=None, metadata=Metadata(cycle_count=0))
        assert not snapshot.executed
        assert snapshot.bus_activity == []

    def test_faulted_snapshot_is_not_executed(self):
        fault = IllegalInstruction("bad", address=0x200, opcode=0xE0FF)
        snapshot = Snapshot(state=CpuState(), operation=Operation(0xE0FF, "?"),
                            metadata=Metadata(cycle_count=0), fault=fault)
        assert not snapshot.executed

class TestFaults:
    @pytest.mark.parametrize("cls, kind", [
        (OutOfBoundsFetch, FaultKind.OUT_OF_BOUNDS_FETCH),
        (StackOverflow, FaultKind.STACK_OVERFLOW),
        (StackUnderflow, FaultKind.STACK_UNDERFLOW),
        (IllegalInstruction, FaultKind.ILLEGAL_INSTRUCTION),
        (IndexOutOfBounds, FaultKind.INDEX_OUT_OF_BOUNDS),
    ])
    def test_fatal_fault_kinds(self, cls, kind):
        fault = cls("message")
        assert isinstance(fault, MachineFault)
        assert fault.kind is kind

    # @intent:test_case_context 命令ハンドラで不明なコンテキストが後から補完されることを検証します。
    def test_with_context_fills_missing_fields(self):
        fault = StackUnderflow("empty").with_context(0x204, 0x00EE)
        assert fault.address == 0x204
        assert fault.opcode == 0x00EE
        assert str(fault) == "StackUnderflow: empty (pc=$204, opcode=$00EE)"

    def test_with_context_keeps_existing_fields(self):
        fault = OutOfBoundsFetch("outside", address=0xFFF).with_context(0x200, None)
        assert fault.address == 0xFFF
        assert fault.opcode is None
        assert str(fault) == "OutOfBoundsFetch: outside (pc=$FFF)"

    def test_program_too_large_is_not_fatal(self):
        error = ProgramTooLarge(4000, 3584)
        assert isinstance(error, Chip8Error)
        assert not isinstance(error, MachineFault)
        assert error.kind is FaultKind.PROGRAM_TOO_LARGE
        assert error.size == 4000
