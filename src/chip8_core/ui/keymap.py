"""
ホストのキー名からCHIP-8のキー番号への変換。
Qtに依存しない純粋なロジックとして分離し、UIのイベント処理から利用します。
"""
from typing import Dict, Optional

# @intent:responsibility 設定ファイルのkey_mapに基づいてホストのキー名をキー番号に変換します。
class KeyMapper:
    def __init__(self, key_map: Dict[str, int]):
        self._map = {name.upper(): index for name, index in key_map.items()}

    # @intent:return 割り当てのないキーの場合はNone。
    def translate(self, host_key: str) -> Optional[int]:
        if not host_key:
            return None
        return self._map.get(host_key.upper())
