"""
コアとUIの間で受け渡す値の型。
"""
from typing import List, NamedTuple, Tuple

# @intent:data_structure フレームバッファの不変コピー。frame[y][x] が 0 または 1。
PixelRows = Tuple[Tuple[int, ...], ...]

# @intent:data_structure 表示するレジスタ1本。widthはビット数で、UIは16進の桁数に換算する。
class RegisterInfo(NamedTuple):
    name: str
    width: int

# @intent:data_structure 見出し付きでまとめて表示するレジスタの組。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
