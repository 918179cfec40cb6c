# src/chip8_core/arch/chip8/keypad.py
"""
16キーの入力ラッチ。
ホストのキーイベント（押下・解放）で書き込まれ、命令実行中に同期的に読み出されます。
"""
from typing import List

KEY_COUNT = 16

# @intent:responsibility キーの押下状態を保持し、認識できないキーIDを無視します。
class InputLatch:
    def __init__(self):
        self._keys: List[bool] = [False] * KEY_COUNT

    @staticmethod
    def is_valid_key(key_id) -> bool:
        # boolはintのサブクラスなので明示的に除外する
        return isinstance(key_id, int) and not isinstance(key_id, bool) and 0 <= key_id < KEY_COUNT

    # @intent:return キーIDが認識された場合True。
    def press(self, key_id: int) -> bool:
        if not self.is_valid_key(key_id):
            return False
        self._keys[key_id] = True
        return True

    # @intent:return キーIDが認識された場合True（解放イベントとして扱われる）。
    def lift(self, key_id: int) -> bool:
        if not self.is_valid_key(key_id):
            return False
        self._keys[key_id] = False
        return True

    def is_pressed(self, key_id: int) -> bool:
        return self._keys[key_id & 0xF]

    def pressed_keys(self) -> List[int]:
        return [key for key, down in enumerate(self._keys) if down]

