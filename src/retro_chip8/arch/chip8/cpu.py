# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import logging
import random
from typing import Dict, List, Optional

from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Operation, Snapshot
from retro_chip8.common.types import (
    ExtensionMode, Framebuffer, KeypadSnapshot, RegisterInfo, RegisterLayoutInfo, RunState, StackPolicy,
)
from retro_chip8.transport.bus import Bus
from retro_chip8.loader.loader import RomLoader, RomSource
from retro_chip8.arch.chip8.state import (
    Chip8CpuState, DISPLAY_WIDTH, DISPLAY_HEIGHT, KEY_COUNT, REGISTER_COUNT, VF,
)
from retro_chip8.arch.chip8.quirks import Quirks
from retro_chip8.arch.chip8.timers import TimerController, TIMER_HZ
from retro_chip8.arch.chip8.instructions import (
    ExecutionContext, decode_opcode, execute_instruction, read_word,
)

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）と、
#                        ホストとの境界（キーパッド、フレームバッファ、タイマ、ROMロード）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    構成（拡張モード、quirk、スタックポリシー、画面サイズ）は生成時に固定され、
    reset() をまたいでも保持されます。インスタンス間で状態は共有しません。
    """
    def __init__(
        self,
        bus: Bus,
        mode: ExtensionMode = ExtensionMode.LEGACY,
        quirks: Optional[Quirks] = None,
        stack_policy: StackPolicy = StackPolicy.CLAMP,
        strict_opcodes: bool = False,
        rng_seed: Optional[int] = None,
        display_width: int = DISPLAY_WIDTH,
        display_height: int = DISPLAY_HEIGHT,
        timer_hz: int = TIMER_HZ,
    ):
        self._mode = mode
        self._display_width = display_width
        self._display_height = display_height
        self._context = ExecutionContext(
            quirks=quirks if quirks is not None else Quirks.for_mode(mode),
            rng=random.Random(rng_seed),
            stack_policy=stack_policy,
            strict_opcodes=strict_opcodes,
        )
        self._timers = TimerController(timer_hz)
        self._loader = RomLoader()
        self._rom: Optional[bytes] = None
        super().__init__(bus)

    # @intent:responsibility CHIP-8の初期状態を生成します。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(display_width=self._display_width, display_height=self._display_height)

    @property
    def mode(self) -> ExtensionMode:
        return self._mode

    @property
    def quirks(self) -> Quirks:
        return self._context.quirks

    @property
    def timers(self) -> TimerController:
        return self._timers

    # --- ROM / リセット ---

    # @intent:responsibility ROMを読み込み、全ての可変状態を初期化した上でメモリに配置します。
    # @intent:post-condition 失敗時（RomTooLarge / RomUnreadable）は例外を送出し、以前の状態を保持します。
    def load_rom(self, source: RomSource) -> None:
        data = self._loader.read(source)
        self._loader.validate(data)
        self._rom = data
        self.reset()

    # @intent:responsibility 同じROMで再ロードし、レジスタ・スタック・タイマ・キーパッド・画面を初期化します。
    # @intent:rationale 構成（モード、quirk、乱数生成器）は保持します。
    def reset(self) -> None:
        super().reset()
        self._timers.reset()
        # 画面は空になるので、表示側に再描画を促す
        self._state.draw_flag = True
        if self._rom is not None:
            self._loader.load_bytes(self._rom, self._bus, self._state)
            logger.info("CPU reset with %d byte ROM", len(self._rom))

    @property
    def rom_loaded(self) -> bool:
        return self._rom is not None

    # --- 命令サイクル ---

    # @intent:responsibility PCから2バイトをビッグエンディアンの16ビットワードとしてフェッチします。
    def _fetch(self) -> int:
        return read_word(self._bus, self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._context)

    # @intent:responsibility 指定数の命令サイクルを連続実行し、最後のスナップショットを返します。
    # @intent:rationale キー入力待ち中も同じ命令を再実行するだけなので、バッチは常に指定数を消化します。
    def run_batch(self, count: int) -> Optional[Snapshot]:
        snapshot = None
        for _ in range(count):
            snapshot = self.step()
        return snapshot

    # --- タイマ ---

    # @intent:responsibility ディレイ／サウンドタイマを1tick（1/60秒分）進めます。
    def tick_timers(self) -> None:
        self._timers.tick(self._state)

    def advance_timers(self, elapsed: float) -> int:
        return self._timers.advance(self._state, elapsed)

    @property
    def sound_active(self) -> bool:
        return self._state.sound_active

    # --- キーパッド ---

    # @intent:responsibility 入力アダプタからのキー状態を反映します。
    # @intent:pre-condition key は 0x0-0xF である必要があります。
    def set_key(self, key: int, pressed: bool) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key {key} out of range (0x0-0xF).")
        self._state.keypad[key] = pressed

    def press_key(self, key: int) -> None:
        self.set_key(key, True)

    def release_key(self, key: int) -> None:
        self.set_key(key, False)

    def set_keypad(self, snapshot: KeypadSnapshot) -> None:
        if len(snapshot) != KEY_COUNT:
            raise ValueError(f"Keypad snapshot must have {KEY_COUNT} entries.")
        self._state.keypad[:] = [bool(k) for k in snapshot]

    @property
    def waiting_for_key(self) -> bool:
        return self._state.awaiting_key is not None

    # --- 画面 ---

    @property
    def framebuffer(self) -> Framebuffer:
        return self._state.framebuffer

    # @intent:responsibility 前回の呼び出し以降に画面が変更されたかを返し、フラグをクリアします。
    def consume_draw_flag(self) -> bool:
        drawn = self._state.draw_flag
        self._state.draw_flag = False
        return drawn

    @property
    def run_state(self) -> RunState:
        return self._state.run_state

    @run_state.setter
    def run_state(self, value: RunState) -> None:
        self._state.run_state = value

    # --- UI向けAPI ---

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{n:X}": s.v[n] for n in range(REGISTER_COUNT)}
        registers.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer})
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility VFのフラグ用途と、キー待ち・サウンド出力の状態を提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {
            "VF": s.v[VF] != 0,
            "KEY_WAIT": s.awaiting_key is not None,
            "SOUND": s.sound_active,
        }
