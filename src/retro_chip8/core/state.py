# retro_chip8/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（プログラムカウンタとスタックカーソル）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    特定のアーキテクチャ（chip8など）に応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0       # Stack cursor (積まれているリターンアドレスの数)
