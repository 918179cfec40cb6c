# src/chip8_core/ui/app.py
"""
PySide6アプリケーションのエントリポイント。
アプリケーションを初期化し、メインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chip8_core.config.loader import ConfigLoader
from chip8_core.config.models import MachineConfig
from .main_window import MainWindow

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="chip8-core", description="CHIP-8 virtual machine")
    parser.add_argument("program", nargs="?", help="raw CHIP-8 program to load at $200")
    parser.add_argument("-c", "--config", help="machine config (YAML)")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main():
    args = parse_args(sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ConfigLoader().load_from_file(args.config) if args.config else MachineConfig()

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    main_win.show()
    if args.program and main_win.load_program(args.program):
        main_win.start()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
