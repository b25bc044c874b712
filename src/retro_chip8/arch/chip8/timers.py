# src/retro_chip8/arch/chip8/timers.py
"""
ディレイタイマとサウンドタイマの減算ケイデンスを管理します。

タイマは命令の実行速度とは無関係に、論理的に一定の周波数（既定60Hz）で減算されます。
"""
from retro_chip8.arch.chip8.state import Chip8CpuState

TIMER_HZ = 60

# @intent:responsibility 一定周波数でのタイマ減算と、経過時間からのtick数換算を提供します。
class TimerController:
    def __init__(self, hz: int = TIMER_HZ):
        if hz <= 0:
            raise ValueError("Timer frequency must be positive.")
        self._hz = hz
        self._accumulator = 0.0

    @property
    def hz(self) -> int:
        return self._hz

    # @intent:responsibility 両タイマを1つずつ0に向けて減算します。
    def tick(self, state: Chip8CpuState) -> None:
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    # @intent:responsibility 実時間の経過分だけtickし、実行したtick数を返します。端数は次回に持ち越します。
    def advance(self, state: Chip8CpuState, elapsed: float) -> int:
        # 周期単位で積算する（浮動小数の誤差でtickを取りこぼさないよう微小値を許容）
        self._accumulator += elapsed * self._hz
        ticks = int(self._accumulator + 1e-9)
        self._accumulator = max(0.0, self._accumulator - ticks)
        for _ in range(ticks):
            self.tick(state)
        return ticks

    def reset(self) -> None:
        self._accumulator = 0.0
