# chip8_core/loader/loader.py
"""
プログラムローダーモジュール。
ヘッダのない生のバイナリファイルを読み込み、仮想マシンの0x200以降にロードします。
"""
import logging
from pathlib import Path
from typing import Union

from chip8_core.arch.chip8.cpu import Chip8Cpu

logger = logging.getLogger(__name__)

class ProgramLoader:
    """
    生のバイナリファイルを読み込み、Chip8Cpu.load_programに渡すローダー。
    プログラムが大きすぎる場合のProgramTooLargeはそのまま呼び出し元に伝播します。
    """
    def read_file(self, file_path: Union[str, Path]) -> bytes:
        with open(file_path, 'rb') as f:
            return f.read()

    # @intent:return ロードしたバイト数。
    def load_file(self, file_path: Union[str, Path], cpu: Chip8Cpu) -> int:
        data = self.read_file(file_path)
        cpu.load_program(data)
        logger.debug("Loaded program %s", file_path)
        return len(data)
