# src/chip8_core/ui/main_window.py
"""
メインウィンドウの実装。
仮想マシンのホストとして、命令ティックとタイマーティックを駆動し、
キーイベントを転送し、フレームバッファのスナップショットを描画します。
"""
import logging
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QApplication, QWidget, QHBoxLayout, QToolBar, QLabel, QFileDialog, QMessageBox
)
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QKeyEvent, QKeySequence
from PySide6.QtCore import Qt, QTimer, Slot

from chip8_core.config.loader import ConfigLoader
from chip8_core.config.models import MachineConfig
from chip8_core.config.builder import SystemBuilder
from chip8_core.core.errors import MachineFault, ProgramTooLarge
from chip8_core.arch.chip8.state import RunState
from chip8_core.loader.loader import ProgramLoader
from .display_view import DisplayView
from .register_view import RegisterView
from .keymap import KeyMapper
from .fonts import get_monospace_font_family

logger = logging.getLogger(__name__)

# @intent:constant 命令ティックのタイマー間隔(ms)。1回のティックで複数命令をまとめて実行する。
BATCH_INTERVAL_MS = 16

# @intent:utility_function Qtのキーイベントを設定ファイルで使うキー名に変換します。
def host_key_name(event: QKeyEvent) -> str:
    text = event.text().upper()
    if text and text.isprintable() and not text.isspace():
        return text
    return QKeySequence(event.key()).toString().upper()

# @intent:responsibility アプリケーションのメインウィンドウを定義し、ホスト側の配線を組み立てます。
class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウクラス。
    全ての処理はGUIスレッド上のQTimerで駆動されるため、マシンへのアクセスは直列化されます。
    """
    def __init__(self, config: Optional[MachineConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("CHIP-8 Core")

        self._config = config or MachineConfig()
        self._program_path: Optional[str] = None

        self._cpu_timer = QTimer(self)
        self._cpu_timer.timeout.connect(self._on_instruction_tick)
        self._timer_tick = QTimer(self)
        self._timer_tick.timeout.connect(self._on_timer_tick)

        self._set_dark_theme()
        self._create_central_widget()
        self._create_toolbar()
        self._create_menus()
        self._setup_backend(self._config)

        self._update_ui_state(False)

    # @intent:responsibility 構成からバックエンド（Bus・CPU）を生成し、各ビューに接続します。
    def _setup_backend(self, config: MachineConfig):
        self._config = config
        self.cpu, self.bus = SystemBuilder().build_system(config, on_fault=self._on_fault)
        self._key_mapper = KeyMapper(config.key_map)
        self._steps_per_batch = max(1, round(config.instructions_per_second * BATCH_INTERVAL_MS / 1000))

        self.display_view.set_scale(config.scale)
        self.display_view.set_colors(config.colors.foreground, config.colors.background)
        self.register_view.set_cpu(self.cpu)
        self._refresh_view(force=True)

    def _create_central_widget(self):
        central = QWidget()
        layout = QHBoxLayout(central)
        self.display_view = DisplayView(self._config.scale,
                                        self._config.colors.foreground, self._config.colors.background)
        layout.addWidget(self.display_view, alignment=Qt.AlignTop)
        self.register_view = RegisterView()
        layout.addWidget(self.register_view)
        self.setCentralWidget(central)

        self.state_label = QLabel("")
        self.sound_label = QLabel("")
        self.statusBar().addWidget(self.state_label, 1)
        self.statusBar().addPermanentWidget(self.sound_label)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.load_program_action = QAction("Load Program...", self)
        self.load_program_action.setShortcut("Ctrl+O")
        self.load_program_action.triggered.connect(self._load_program_dialog)
        file_menu.addAction(self.load_program_action)

        self.load_config_action = QAction("Load Config...", self)
        self.load_config_action.triggered.connect(self._load_config_dialog)
        file_menu.addAction(self.load_config_action)

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        # キー入力をツールバーに奪われないようにする
        toolbar.setFocusPolicy(Qt.NoFocus)
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.triggered.connect(self.stop)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._step_once)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self._reset_machine)
        toolbar.addAction(self.reset_action)

    def _update_ui_state(self, is_running: bool):
        self.load_program_action.setEnabled(not is_running)
        self.load_config_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.stop_action.setEnabled(is_running)

    @property
    def is_running(self) -> bool:
        return self._cpu_timer.isActive()

    @Slot()
    def start(self):
        self._cpu_timer.start(BATCH_INTERVAL_MS)
        self._timer_tick.start(max(1, round(1000 / self._config.timer_hz)))
        self._update_ui_state(True)
        self._refresh_view()

    @Slot()
    def stop(self):
        self._cpu_timer.stop()
        self._timer_tick.stop()
        self._update_ui_state(False)
        self._refresh_view()

    # @intent:responsibility 命令ティック: 1バッチ分の命令を実行し、画面を更新します。
    @Slot()
    def _on_instruction_tick(self):
        self.cpu.run_for(self._steps_per_batch)
        self._refresh_view()

    @Slot()
    def _on_timer_tick(self):
        self.cpu.timer_tick()
        self.sound_label.setText("♪" if self.cpu.sound_active else "")

    @Slot()
    def _step_once(self):
        self.cpu.step()
        self._refresh_view(force=True)

    @Slot()
    def _reset_machine(self):
        was_running = self.is_running
        self.stop()
        self.cpu.reset()
        if self._program_path:
            self.load_program(self._program_path)
        self._refresh_view(force=True)
        if was_running:
            self.start()

    # @intent:responsibility コアから通知された致命的な障害を表示し、駆動を停止します。
    def _on_fault(self, fault: MachineFault):
        self.stop()
        self.state_label.setText(f"Halted - {fault}")

    # @intent:responsibility スナップショットを取得して画面・レジスタ・状態表示を更新します。
    def _refresh_view(self, force: bool = False):
        if self.cpu.consume_frame_dirty() or force:
            self.display_view.update_frame(self.cpu.get_framebuffer())
        self.register_view.update_registers()

        run_state = self.cpu.run_state
        if run_state is RunState.HALTED and self.cpu.fault is not None:
            self.state_label.setText(f"Halted - {self.cpu.fault}")
        elif run_state is RunState.WAITING:
            self.state_label.setText("Waiting for key")
        else:
            self.state_label.setText("Running" if self.is_running else "Stopped")

    # @intent:responsibility プログラムをリセット後のマシンにロードします。
    # @intent:return ロードに成功した場合True。
    def load_program(self, path: str) -> bool:
        try:
            self.cpu.reset()
            ProgramLoader().load_file(path, self.cpu)
        except (OSError, ProgramTooLarge) as e:
            logger.error("Failed to load program %s: %s", path, e)
            QMessageBox.critical(self, "Error", f"Failed to load program: {e}")
            return False
        self._program_path = path
        self.setWindowTitle(f"CHIP-8 Core - {path}")
        self._refresh_view(force=True)
        return True

    @Slot()
    def _load_program_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Program", "", "CHIP-8 Programs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            self.load_program(file_name)

    @Slot()
    def _load_config_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Machine Config", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if not file_name:
            return
        try:
            config = ConfigLoader().load_from_file(file_name)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Failed to load config: {e}")
            return
        self._setup_backend(config)
        if self._program_path:
            self.load_program(self._program_path)

    # --- Key input ---
    def keyPressEvent(self, event: QKeyEvent):
        key_id = self._key_mapper.translate(host_key_name(event))
        if key_id is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.cpu.press_key(key_id)

    def keyReleaseEvent(self, event: QKeyEvent):
        key_id = self._key_mapper.translate(host_key_name(event))
        if key_id is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.cpu.lift_key(key_id)
        self._refresh_view()

    def _set_dark_theme(self):
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(29, 29, 29))
        dark_palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.Text, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        QApplication.setPalette(dark_palette)

        font_family = get_monospace_font_family()
        self.setStyleSheet(f"""
            QWidget {{ font-family: '{font_family}', monospace; font-size: 10pt; }}
            QMainWindow, QToolBar {{ background-color: #1D1D1D; border: none; }}
            QStatusBar {{ background: #101010; color: #E0E0E0; }}
        """)

    # @intent:responsibility ウィンドウを閉じる際にティック用タイマーを停止します。
    def closeEvent(self, event: QCloseEvent):
        self._cpu_timer.stop()
        self._timer_tick.stop()
        event.accept()
