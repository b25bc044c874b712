# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令の実行結果（CPU状態、実行した命令、バスアクセス）を記録するデータ構造を定義します。
ホストやテストへの情報提供と、トレースログの生成に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional, Any

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "6005"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["V0", "#05"]
    instruction: Optional[Any] = None # デコード済みのフィールドビュー
    length: int = 2 # 命令のバイト長

    # @intent:responsibility ニーモニックとオペランドを連結した表示用テキストを返します。
    @property
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計命令数、トレース文字列など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "0x0200: 6005  LD V0, #05"

# @intent:responsibility ある一時点におけるCPUとバスの状態を記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1命令実行後のCPU状態、実行した命令、およびその命令中のバスアクセスを記録したデータ構造。
    """
    # @intent:rationale stateは実行中のCPUが保持するオブジェクトへの参照です。
    #                  時点の状態を保持したい場合は呼び出し側でコピーを取ります。
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
