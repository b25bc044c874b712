# retro_chip8/runner/runner.py
"""
ホストループモジュール。

フレーム単位でCPUの実行を駆動し（命令バッチ実行 → タイマtick）、
表示・音声アダプタへ境界面の状態を受け渡す責務を負います。
中断（一時停止・終了）はバッチの間でのみ観測され、命令の途中では発生しません。
"""
import logging
import time
from typing import Optional, Protocol

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.common.types import Framebuffer, RunState

logger = logging.getLogger(__name__)

# @intent:responsibility フレームバッファを描画する外部アダプタのインターフェース。
class Renderer(Protocol):
    def render(self, framebuffer: Framebuffer) -> None:
        ...

# @intent:responsibility トーンのON/OFFを受け取る外部アダプタのインターフェース。波形の生成はアダプタ側の責務です。
class AudioSink(Protocol):
    def set_tone(self, active: bool) -> None:
        ...

# @intent:responsibility コアエンジンのフレーム実行と実行状態（RUNNING/PAUSED/QUIT）の管理を行います。
class FrameRunner:
    """
    1フレーム（1タイマtick）ごとに、指定数の命令を実行してからタイマを1つ進めるホストループ。
    """
    def __init__(self, cpu: Chip8Cpu, instructions_per_tick: int = 10,
                 renderer: Optional[Renderer] = None, audio: Optional[AudioSink] = None):
        if instructions_per_tick <= 0:
            raise ValueError("instructions_per_tick must be positive.")
        self._cpu = cpu
        self._instructions_per_tick = instructions_per_tick
        self._renderer = renderer
        self._audio = audio
        self._tone_active = False
        self._frame_count = 0

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def instructions_per_tick(self) -> int:
        return self._instructions_per_tick

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def state(self) -> RunState:
        return self._cpu.run_state

    @property
    def is_running(self) -> bool:
        return self._cpu.run_state == RunState.RUNNING

    @property
    def tone_active(self) -> bool:
        return self._tone_active

    # @intent:responsibility 1フレーム分の処理を行い、再描画が必要だったかを返します。
    # @intent:rationale 一時停止中は命令もタイマも進めません。終了後は何もしません。
    def run_frame(self) -> bool:
        run_state = self._cpu.run_state
        if run_state == RunState.QUIT:
            return False

        if run_state == RunState.RUNNING:
            self._cpu.run_batch(self._instructions_per_tick)
            self._cpu.tick_timers()
            self._frame_count += 1

        self._update_audio()

        if not self._cpu.consume_draw_flag():
            return False
        if self._renderer is not None:
            self._renderer.render(self._cpu.framebuffer)
        return True

    # @intent:responsibility サウンドタイマの状態が変化したときだけ音声アダプタへ通知します。
    def _update_audio(self) -> None:
        active = self._cpu.sound_active and self._cpu.run_state == RunState.RUNNING
        if active == self._tone_active:
            return
        self._tone_active = active
        if self._audio is not None:
            self._audio.set_tone(active)

    # @intent:responsibility 指定フレーム数（Noneなら終了まで）ホストループを回します。ペーシングは単純なsleepです。
    def run(self, max_frames: Optional[int] = None, frame_time: Optional[float] = None) -> int:
        if frame_time is None:
            frame_time = 1.0 / self._cpu.timers.hz
        frames = 0
        while self._cpu.run_state != RunState.QUIT:
            if max_frames is not None and frames >= max_frames:
                break
            started = time.monotonic()
            self.run_frame()
            frames += 1
            remaining = frame_time - (time.monotonic() - started)
            if remaining > 0:
                time.sleep(remaining)
        return frames

    # --- 実行状態の制御 ---

    def pause(self) -> None:
        if self._cpu.run_state == RunState.RUNNING:
            self._set_state(RunState.PAUSED)

    def resume(self) -> None:
        if self._cpu.run_state == RunState.PAUSED and self._cpu.rom_loaded:
            self._set_state(RunState.RUNNING)

    def toggle_pause(self) -> None:
        if self._cpu.run_state == RunState.RUNNING:
            self.pause()
        else:
            self.resume()

    def quit(self) -> None:
        self._set_state(RunState.QUIT)
        self._update_audio()

    # @intent:responsibility 同じROMで再ロードします。構成は保持されます。
    def reset(self) -> None:
        self._cpu.reset()
        self._frame_count = 0
        self._update_audio()
        logger.info("Reset to initial ROM")

    def _set_state(self, new_state: RunState) -> None:
        logger.info("Run state %s -> %s", self._cpu.run_state.value, new_state.value)
        self._cpu.run_state = new_state

    # --- 入力アダプタからの通知 ---

    def press_key(self, key: int) -> None:
        self._cpu.press_key(key)

    def release_key(self, key: int) -> None:
        self._cpu.release_key(key)
