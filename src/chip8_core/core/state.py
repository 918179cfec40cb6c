# chip8_core/core/state.py
"""
Core Layer (命令サイクルが参照する最小限の状態)
"""
from dataclasses import dataclass

# @intent:responsibility AbstractCpuの命令サイクルが直接扱うフィールドだけを持つ基底状態。
@dataclass
class CpuState:
    """
    pc: 次にフェッチする命令のアドレス
    sp: 使用中のスタックの段数
    halted: 致命的な障害の後はTrue。reset()で新しい状態に置き換わるまで戻らない
    """
    pc: int = 0x0000
    sp: int = 0
    halted: bool = False
