"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される列挙型、型エイリアスなどを定義します。
"""
from enum import Enum
from typing import List, NamedTuple, Sequence

# @intent:data_structure フレームバッファの型エイリアス。framebuffer[y][x] で画素のON/OFFを表します。
# CPU (描画命令), Runner, UI (レンダラ) の複数のレイヤーで共通して使用されます。
Framebuffer = List[List[bool]]

# @intent:data_structure キーパッドのスナップショット（16要素のboolシーケンス）。
KeypadSnapshot = Sequence[bool]

# @intent:responsibility 命令セットの挙動を切り替える拡張モードを定義します。
class ExtensionMode(Enum):
    LEGACY = "LEGACY"  # COSMAC VIP 互換
    MODERN = "MODERN"  # CHIP-48 / SUPER-CHIP 系

# @intent:responsibility エミュレータ全体の実行状態を定義します。
class RunState(Enum):
    QUIT = "QUIT"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"

# @intent:data_structure 単一のレジスタの表示定義。UIが動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Pointers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]

# @intent:responsibility コールスタックの溢れ／空読み時の振る舞いを定義します。
class StackPolicy(Enum):
    CLAMP = "clamp"  # ログを出して実行を継続する
    RAISE = "raise"  # StackError を呼び出し元へ送出する
