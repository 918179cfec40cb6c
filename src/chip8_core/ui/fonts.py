"""
UIフォント管理モジュール。

レジスタ表示やステータスバーで使用する等幅フォントを、
利用可能なフォントの中から選択します。
"""
from PySide6.QtGui import QFontDatabase

PREFERRED_MONOSPACE = ("JetBrains Mono", "Consolas", "Menlo", "DejaVu Sans Mono", "Courier New")

# @intent:responsibility 現在のシステムで利用可能な等幅フォントファミリー名を返します。
def get_monospace_font_family() -> str:
    available = set(QFontDatabase.families())
    for family in PREFERRED_MONOSPACE:
        if family in available:
            return family
    # 見つからない場合はQtのシステム等幅フォント
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
