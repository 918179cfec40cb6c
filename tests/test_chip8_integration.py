# tests/test_chip8_integration.py
"""
構成から組み立てたマシン全体で、プログラムを実行する統合テスト。
"""
import unittest

from chip8_core.config.models import MachineConfig
from chip8_core.config.builder import SystemBuilder
from chip8_core.core.errors import FaultKind
from chip8_core.arch.chip8.state import RunState

# @intent:test_suite SystemBuilderで生成したマシンにプログラムをロードし、命令列の実行結果を検証します。
class TestChip8Integration(unittest.TestCase):
    def setUp(self):
        self.faults = []
        self.cpu, self.bus = SystemBuilder().build_system(MachineConfig(rng_seed=1), on_fault=self.faults.append)

    def _run(self, program: bytes, steps: int):
        self.cpu.load_program(program)
        for _ in range(steps):
            self.cpu.step()
        return self.cpu.get_state()

    def test_add_with_carry(self):
        # LD V0, #$FF / LD V1, #$01 / ADD V0, V1
        state = self._run(bytes([0x60, 0xFF, 0x61, 0x01, 0x80, 0x14]), 3)
        self.assertEqual(state.v[0], 0x00)
        self.assertEqual(state.vf, 1)

    def test_sub_with_borrow(self):
        # LD V0, #$01 / LD V1, #$02 / SUB V0, V1
        state = self._run(bytes([0x60, 0x01, 0x61, 0x02, 0x80, 0x15]), 3)
        self.assertEqual(state.v[0], 0xFF)
        self.assertEqual(state.vf, 0)

    def test_bcd_store_load_roundtrip(self):
        program = bytes([
            0x60, 0x7B,  # LD V0, #$7B (123)
            0xA3, 0x00,  # LD I, $300
            0xF0, 0x33,  # LD B, V0
            0xA3, 0x00,  # LD I, $300
            0xF2, 0x65,  # LD V2, [I]
        ])
        state = self._run(program, 5)
        self.assertEqual([self.cpu.read_memory(0x300 + k) for k in range(3)], [1, 2, 3])
        self.assertEqual(state.v[:3], [1, 2, 3])
        self.assertEqual(state.i, 0x303)

    # @intent:test_case_subroutine CALLからRETでCALLの次の命令に戻ることを検証します。
    def test_call_and_return(self):
        program = bytes([
            0x22, 0x06,  # 200: CALL $206
            0x61, 0x01,  # 202: LD V1, #$01
            0x12, 0x04,  # 204: JP $204
            0x60, 0x05,  # 206: LD V0, #$05
            0x00, 0xEE,  # 208: RET
        ])
        state = self._run(program, 4)
        self.assertEqual(state.pc, 0x204)
        self.assertEqual(state.sp, 0)
        self.assertEqual(state.v[0], 5)
        self.assertEqual(state.v[1], 1)

    def test_recursive_call_overflows_stack(self):
        # 200: CALL $200
        state = self._run(bytes([0x22, 0x00]), 16)
        self.assertEqual(state.sp, 16)
        self.assertFalse(self.cpu.halted)

        snapshot = self.cpu.step()
        self.assertEqual(snapshot.fault.kind, FaultKind.STACK_OVERFLOW)
        self.assertEqual(len(self.faults), 1)

    def test_draw_digit(self):
        program = bytes([
            0x60, 0x08,  # LD V0, #$08
            0xF0, 0x29,  # LD F, V0
            0x61, 0x0A,  # LD V1, #$0A
            0xD1, 0x15,  # DRW V1, V1, 5
            0xD1, 0x15,  # DRW V1, V1, 5
        ])
        self._run(program, 4)
        frame = self.cpu.get_framebuffer()
        self.assertEqual(frame[10][10:14], (1, 1, 1, 1))
        self.assertEqual(frame[11][10:14], (1, 0, 0, 1))
        self.assertEqual(self.cpu.get_state().vf, 0)

        self.cpu.step()
        self.assertEqual(sum(sum(row) for row in self.cpu.get_framebuffer()), 0)
        self.assertEqual(self.cpu.get_state().vf, 1)

    def test_wait_for_key_program(self):
        # LD V3, K / SKP V3 / JP $200 / LD V4, #$01
        self.cpu.load_program(bytes([0xF3, 0x0A, 0xE3, 0x9E, 0x12, 0x00, 0x64, 0x01]))
        self.cpu.run_for(5)
        self.assertEqual(self.cpu.run_state, RunState.WAITING)

        self.cpu.press_key(0xC)
        self.cpu.lift_key(0xC)
        self.cpu.press_key(0xC)
        self.cpu.run_for(2)
        self.assertEqual(self.cpu.get_state().v[3], 0xC)
        self.assertEqual(self.cpu.get_state().v[4], 1)

    # @intent:test_case_empty プログラム無しでも有限回のstepで必ず停止し、以後のstepは何もしないことを検証します。
    def test_seventeen_steps_without_program(self):
        cpu, _ = SystemBuilder().build_system(MachineConfig(font=False))
        for _ in range(17):
            cpu.step()
        self.assertTrue(cpu.halted)
        self.assertEqual(cpu.fault.kind, FaultKind.STACK_OVERFLOW)

        pc = cpu.get_state().pc
        snapshot = cpu.step()
        self.assertIsNone(snapshot.operation)
        self.assertEqual(cpu.get_state().pc, pc)

    def test_empty_memory_with_font_halts_on_glyph_data(self):
        cpu, _ = SystemBuilder().build_system(MachineConfig())
        cpu.run_for(17)
        self.assertTrue(cpu.halted)
        self.assertEqual(cpu.fault.kind, FaultKind.ILLEGAL_INSTRUCTION)
        self.assertEqual(cpu.fault.opcode, 0xF090)

if __name__ == '__main__':
    unittest.main()
