# retro_chip8/core/cpu.py
"""
Core Layer (抽象CPU)

1命令ぶんの実行手順（フェッチ、デコード、PC前進、実行、記録）を固定し、
各段階の中身をサブクラスに委ねます。
CHIP-8固有の命令セマンティクスは arch/chip8 以下にあります。
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.core.state import CpuState
from retro_chip8.common.types import RegisterLayoutInfo

logger = logging.getLogger(__name__)

# @intent:responsibility 命令サイクルの骨格と、UI向けのレジスタ参照インターフェースを定義します。
class AbstractCpu(ABC):
    """
    命令サイクルを駆動する抽象基底クラス。

    サブクラスは状態の生成、フェッチ、デコード、実行の4つを実装します。
    状態オブジェクトは get_state() で参照し、外部から差し替えることはしません。
    """
    # @intent:pre-condition `bus` はメモリがマップ済みであること。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """電源投入直後の状態を新しく作って返します。"""

    # @intent:responsibility 状態を作り直し、実行サイクル数を0に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        return self._state

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility PCの位置にある命令語を読み出します。PCは動かしません。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:pre-condition PCは既に次の命令を指しています。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 1命令を実行し、その結果を Snapshot として返します。
    def step(self) -> Snapshot:
        """
        1命令サイクルを実行します。

        PCは実行の前に命令長だけ進めます。
        ジャンプやスキップはその値を起点に書き換えるので、分岐先が上書きされることはありません。
        前サイクルの残りのバス記録は捨て、このサイクルのアクセスだけを Snapshot に添付します。
        """
        self._bus.drain_activity_log()
        origin = self._state.pc

        operation = self._decode(self._fetch())
        self._advance_pc(operation)
        self._execute(operation)

        return self._record(origin, operation)

    def _advance_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    def _record(self, origin: int, operation: Operation) -> Snapshot:
        self._cycle_count += 1
        trace = f"{origin:#06x}: {operation.opcode_hex}  {operation.text}"
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(trace)
        return Snapshot(
            state=self._state,
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=trace),
            bus_activity=self._bus.drain_activity_log(),
        )

    # @intent:responsibility UIが表示するレジスタ名と値の対応を返します。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """レジスタ表示のグループ分けと並び順。"""

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass
