import os
import sys
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt, QEvent, QSize
from PySide6.QtGui import QKeyEvent

from chip8_core.config.models import MachineConfig
from chip8_core.config.builder import SystemBuilder
from chip8_core.arch.chip8.state import RunState
from chip8_core.ui.display_view import DisplayView
from chip8_core.ui.register_view import RegisterView
from chip8_core.ui.main_window import MainWindow, host_key_name

class QtTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

class TestDisplayView(QtTestCase):
    def test_size_follows_scale(self):
        view = DisplayView(scale=5)
        self.assertEqual(view.sizeHint(), QSize(320, 160))
        view.set_scale(8)
        self.assertEqual(view.sizeHint(), QSize(512, 256))

    def test_update_frame(self):
        """
        ホストが取得したフレームバッファのスナップショットがそのまま表示対象になることを検証します。
        """
        cpu, _ = SystemBuilder().build_system(MachineConfig())
        # DRW V0, V0, 5 (I = 0: グリフ "0")
        cpu.load_program(bytes([0xD0, 0x05]))
        cpu.step()

        view = DisplayView()
        self.assertEqual(view.lit_pixel_count(), 0)
        view.update_frame(cpu.get_framebuffer())
        self.assertEqual(view.lit_pixel_count(), 14)
        view.grab()

class TestRegisterView(QtTestCase):
    def test_register_values(self):
        cpu, _ = SystemBuilder().build_system(MachineConfig())
        view = RegisterView()
        view.set_cpu(cpu)
        self.assertEqual(view.displayed_value("PC"), "0x0200")
        self.assertEqual(view.displayed_value("VA"), "0x00")

        cpu.load_program(bytes([0x6A, 0x2F]))
        cpu.step()
        view.update_registers()
        self.assertEqual(view.displayed_value("VA"), "0x2F")
        self.assertEqual(view.displayed_value("PC"), "0x0202")
        self.assertTrue(view.is_highlighted("VA"))
        self.assertFalse(view.is_highlighted("V0"))

class TestMainWindow(QtTestCase):
    def setUp(self):
        self.window = MainWindow(MachineConfig(rng_seed=0))

    def tearDown(self):
        self.window.close()

    def _key(self, event_type, key, text):
        return QKeyEvent(event_type, key, Qt.NoModifier, text)

    def test_host_key_name(self):
        self.assertEqual(host_key_name(self._key(QEvent.KeyPress, Qt.Key_Q, "q")), "Q")
        self.assertEqual(host_key_name(self._key(QEvent.KeyPress, Qt.Key_4, "4")), "4")

    # @intent:test_case_keys ホストのキー解放が待機状態を解除することを検証します。
    def test_key_release_resolves_wait(self):
        self.window.cpu.load_program(bytes([0xF5, 0x0A]))
        self.window._step_once()
        self.assertIs(self.window.cpu.run_state, RunState.WAITING)
        self.assertEqual(self.window.state_label.text(), "Waiting for key")

        self.window.keyPressEvent(self._key(QEvent.KeyPress, Qt.Key_W, "w"))
        self.window.keyReleaseEvent(self._key(QEvent.KeyRelease, Qt.Key_W, "w"))
        self.assertIs(self.window.cpu.run_state, RunState.RUNNING)
        self.assertEqual(self.window.cpu.get_state().v[5], 0x5)

    def test_load_program_and_fault(self):
        import tempfile
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "fault.ch8")
            with open(path, "wb") as f:
                f.write(bytes([0x00, 0xEE]))
            self.assertTrue(self.window.load_program(path))

        self.window._step_once()
        self.assertTrue(self.window.cpu.halted)
        self.assertTrue(self.window.state_label.text().startswith("Halted - StackUnderflow"))
        self.assertFalse(self.window.is_running)

    def test_start_and_stop(self):
        self.window.start()
        self.assertTrue(self.window.is_running)
        self.assertFalse(self.window.run_action.isEnabled())
        self.window.stop()
        self.assertFalse(self.window.is_running)
        self.assertEqual(self.window.state_label.text(), "Stopped")

if __name__ == '__main__':
    unittest.main()
