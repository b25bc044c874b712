"""
物理キーから CHIP-8 の論理キー (0x0-0xF) への対応表。

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F
"""
from typing import Dict, Optional

from PySide6.QtCore import Qt

# @intent:map Qtのキーから論理キー番号へのマッピングテーブル。
_QWERTY_LAYOUT = {
    Qt.Key_1: 0x1, Qt.Key_2: 0x2, Qt.Key_3: 0x3, Qt.Key_4: 0xC,
    Qt.Key_Q: 0x4, Qt.Key_W: 0x5, Qt.Key_E: 0x6, Qt.Key_R: 0xD,
    Qt.Key_A: 0x7, Qt.Key_S: 0x8, Qt.Key_D: 0x9, Qt.Key_F: 0xE,
    Qt.Key_Z: 0xA, Qt.Key_X: 0x0, Qt.Key_C: 0xB, Qt.Key_V: 0xF,
}

def _key_code(key) -> int:
    # PySide6 のバージョンにより列挙型か整数かが異なる
    return key.value if hasattr(key, "value") else int(key)

DEFAULT_KEYMAP: Dict[int, int] = {_key_code(key): value for key, value in _QWERTY_LAYOUT.items()}

# @intent:responsibility 物理キーに対応する論理キー番号を返します。対応が無ければNone。
def map_key(qt_key: int, keymap: Optional[Dict[int, int]] = None) -> Optional[int]:
    return (keymap if keymap is not None else DEFAULT_KEYMAP).get(_key_code(qt_key))
