# src/chip8_core/ui/register_view.py
"""
レジスタ表示パネル。
get_register_layout()のグループ定義からラベルを生成し、get_register_map()の値で更新します。
直前の更新から値が変わったレジスタは強調色で表示します。
"""
from typing import Dict, Optional, Tuple

from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from chip8_core.core.cpu import AbstractCpu
from chip8_core.ui.fonts import get_monospace_font_family

GROUP_STYLE = """
    QGroupBox {
        font-weight: bold;
        border: 1px solid #222;
        border-radius: 4px;
        margin-top: 20px;
        color: #EEE;
        background-color: #121212;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        subcontrol-position: top left;
        padding: 0 5px;
        left: 10px;
        color: #00AAAA;
    }
"""

VALUE_COLOR = "#FFD700"
CHANGED_COLOR = "#FF6060"

# @intent:responsibility CPUのレジスタ値をグループごとのグリッドで表示します。
class RegisterView(QWidget):
    """
    16本の汎用レジスタが収まるよう、グループ内は4列で折り返します。
    """
    COLUMNS = 4

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")
        self._outer = QVBoxLayout(self)
        self._outer.setContentsMargins(4, 4, 4, 4)
        self._panel: Optional[QWidget] = None
        self._cpu: Optional[AbstractCpu] = None
        # レジスタ名 -> (値ラベル, 16進桁数)
        self._fields: Dict[str, Tuple[QLabel, int]] = {}
        self._last_values: Dict[str, int] = {}
        self._value_style = f"font-family: '{get_monospace_font_family()}', monospace; color: %s;"

    # @intent:responsibility 表示対象のCPUを差し替え、パネルを作り直します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._rebuild()
        self.update_registers()

    def _rebuild(self) -> None:
        if self._panel is not None:
            self._outer.removeWidget(self._panel)
            self._panel.deleteLater()
        self._fields.clear()
        self._last_values.clear()

        self._panel = QWidget()
        column = QVBoxLayout(self._panel)
        column.setContentsMargins(0, 0, 0, 0)
        for group in self._cpu.get_register_layout():
            column.addWidget(self._build_group(group.group_name, group.registers))
        column.addStretch()
        self._outer.addWidget(self._panel)

    def _build_group(self, title, registers) -> QGroupBox:
        box = QGroupBox(title)
        box.setStyleSheet(GROUP_STYLE)
        grid = QGridLayout(box)
        grid.setContentsMargins(10, 15, 10, 10)
        grid.setHorizontalSpacing(12)
        grid.setVerticalSpacing(4)

        for position, info in enumerate(registers):
            digits = (info.width + 3) // 4
            name = QLabel(f"{info.name}:")
            name.setStyleSheet("font-weight: bold;")
            value = QLabel(f"0x{0:0{digits}X}")
            value.setAlignment(Qt.AlignRight)
            value.setStyleSheet(self._value_style % VALUE_COLOR)

            row, col = divmod(position, self.COLUMNS)
            grid.addWidget(name, row, col * 2)
            grid.addWidget(value, row, col * 2 + 1)
            self._fields[info.name] = (value, digits)
        return box

    # @intent:responsibility 最新の値を表示し、前回から変化したレジスタを強調します。
    def update_registers(self) -> None:
        if self._cpu is None:
            return
        for name, current in self._cpu.get_register_map().items():
            field = self._fields.get(name)
            if field is None:
                continue
            label, digits = field
            previous = self._last_values.get(name)
            label.setText(f"0x{current:0{digits}X}")
            changed = previous is not None and previous != current
            label.setStyleSheet(self._value_style % (CHANGED_COLOR if changed else VALUE_COLOR))
            self._last_values[name] = current

    # @intent:accessor テスト・検査用に表示中のテキストを返します。
    def displayed_value(self, name: str) -> str:
        return self._fields[name][0].text()

    def is_highlighted(self, name: str) -> bool:
        return CHANGED_COLOR in self._fields[name][0].styleSheet()
