# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.common.types import Framebuffer, RunState

# @intent:constant メモリマップとハードウェア構成の定数。
MEMORY_SIZE = 0x1000     # 4KiB
FONT_ADDRESS = 0x000     # フォントグリフの格納先
PROGRAM_START = 0x200    # プログラムのロード先
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START
STACK_DEPTH = 16
REGISTER_COUNT = 16
KEY_COUNT = 16
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

VF = 0xF  # フラグレジスタとして使われるレジスタ番号


def _blank_framebuffer(width: int, height: int) -> Framebuffer:
    return [[False] * width for _ in range(height)]


# @intent:responsibility CHIP-8 CPUの全ての可変状態（レジスタ、スタック、タイマ、キーパッド、フレームバッファ）を保持します。
# @intent:rationale メモリはBus側が所有し、ここにはレジスタ類のみを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。

    sp はスタックカーソルで、積まれているリターンアドレスの数を表します。
    awaiting_key は FX0A 命令でキー入力待ちをしているときの格納先レジスタ番号です。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0
    keypad: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    display_width: int = DISPLAY_WIDTH
    display_height: int = DISPLAY_HEIGHT
    framebuffer: Framebuffer = field(default=None)
    draw_flag: bool = False
    awaiting_key: Optional[int] = None
    # キー待ち開始後、直前に観測したキーパッドの状態（押下エッジ検出用）
    key_wait_previous: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    run_state: RunState = RunState.PAUSED

    def __post_init__(self):
        if self.framebuffer is None:
            self.framebuffer = _blank_framebuffer(self.display_width, self.display_height)

    # @intent:accessor フラグレジスタ VF へのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[VF]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[VF] = value & 0xFF

    @property
    def sound_active(self) -> bool:
        """サウンドタイマが0より大きい間だけトーンを鳴らします。"""
        return self.sound_timer > 0

    # @intent:responsibility フレームバッファを全消去します。
    def clear_framebuffer(self) -> None:
        for row in self.framebuffer:
            for x in range(len(row)):
                row[x] = False
