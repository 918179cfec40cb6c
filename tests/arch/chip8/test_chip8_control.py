import unittest
from random import Random

from chip8_core.transport.bus import Bus, RAM
from chip8_core.core.errors import IllegalInstruction, StackOverflow, StackUnderflow
from chip8_core.arch.chip8.cpu import Chip8Cpu
from chip8_core.arch.chip8.state import RunState, STACK_DEPTH
from chip8_core.arch.chip8.instructions import decode_opcode, execute_instruction

# @intent:test_suite ジャンプ、サブルーチン、条件スキップ、キー入力の各命令を検証します。
class TestChip8ControlInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x000, 0xFFF, RAM(0x1000))
        self.rng = Random(0)
        self.cpu = Chip8Cpu(self.bus, rng=self.rng)
        self.state = self.cpu.get_state()

    def _execute(self, opcode, pc=0x200):
        self.state.pc = pc
        op = decode_opcode(opcode)
        self.state.pc += op.length
        execute_instruction(op, self.state, self.bus, self.rng)
        return op

    def test_jp(self):
        self._execute(0x1ABC)
        self.assertEqual(self.state.pc, 0xABC)

    def test_jp_v0(self):
        self.state.v[0] = 0x10
        op = self._execute(0xB300)
        self.assertEqual(self.state.pc, 0x310)
        self.assertEqual(op.operands, ["V0", "$300"])

    def test_call_and_ret(self):
        self._execute(0x2400, pc=0x204)
        self.assertEqual(self.state.pc, 0x400)
        self.assertEqual(self.state.sp, 1)
        self.assertEqual(self.state.stack[0], 0x206)

        self._execute(0x00EE, pc=0x400)
        self.assertEqual(self.state.pc, 0x206)
        self.assertEqual(self.state.sp, 0)

    # @intent:test_case_sys 0NNNはサブルーチン呼び出しとして扱われることを検証します。
    def test_sys_is_a_call(self):
        op = self._execute(0x0300)
        self.assertEqual(op.mnemonic, "SYS")
        self.assertEqual(self.state.pc, 0x300)
        self.assertEqual(self.state.stack[0], 0x202)

    def test_stack_allows_sixteen_nested_calls(self):
        for depth in range(STACK_DEPTH):
            self._execute(0x2200)
        self.assertEqual(self.state.sp, STACK_DEPTH)

        with self.assertRaises(StackOverflow):
            self._execute(0x2200)
        self.assertEqual(self.state.sp, STACK_DEPTH)

    def test_ret_with_empty_stack(self):
        with self.assertRaises(StackUnderflow):
            self._execute(0x00EE)

    def test_se_sne_immediate(self):
        self.state.v[1] = 0x42
        self._execute(0x3142)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x3143)
        self.assertEqual(self.state.pc, 0x202)

        self._execute(0x4143)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x4142)
        self.assertEqual(self.state.pc, 0x202)

    def test_se_sne_register(self):
        self.state.v[1] = 0x42
        self.state.v[2] = 0x42
        self._execute(0x5120)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x202)

        self.state.v[2] = 0x00
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x204)

    def test_undefined_register_compare_variants_are_illegal(self):
        for opcode in (0x5121, 0x912F):
            with self.assertRaises(IllegalInstruction):
                decode_opcode(opcode)

    # @intent:test_case_keys EX9E/EXA1がキー番号（VXの下位4ビット）で比較することを検証します。
    def test_skp_sknp(self):
        self.state.v[3] = 0x0B
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x202)
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x204)

        self.cpu.press_key(0xB)
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x202)

        self.state.v[3] = 0x1B
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x204)

    def test_undefined_family_e_variant_is_illegal(self):
        with self.assertRaises(IllegalInstruction):
            decode_opcode(0xE0FF)

    def test_wait_key_enters_waiting_state(self):
        op = self._execute(0xF70A)
        self.assertEqual(op.operands, ["V7", "K"])
        self.assertEqual(self.state.waiting_register, 7)
        self.assertIs(self.state.run_state, RunState.WAITING)

if __name__ == '__main__':
    unittest.main()
