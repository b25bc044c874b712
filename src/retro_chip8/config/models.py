from dataclasses import dataclass, field
from typing import Optional

from retro_chip8.common.types import ExtensionMode, StackPolicy

@dataclass
class DisplayConfig:
    width: int = 64
    height: int = 32
    scale_factor: int = 20
    fg_color: int = 0xFFFFFFFF  # RGBA
    bg_color: int = 0x00000000  # RGBA

@dataclass
class QuirkOverrides:
    # None は拡張モードの既定値を使うことを意味する
    logic_resets_vf: Optional[bool] = None
    shift_uses_vy: Optional[bool] = None
    load_store_increments_i: Optional[bool] = None
    jump_uses_vx: Optional[bool] = None
    clip_sprites: Optional[bool] = None

@dataclass
class SystemConfig:
    extension_mode: ExtensionMode = ExtensionMode.LEGACY
    instructions_per_tick: int = 10
    timer_hz: int = 60
    display: DisplayConfig = field(default_factory=DisplayConfig)
    quirks: QuirkOverrides = field(default_factory=QuirkOverrides)
    stack_policy: StackPolicy = StackPolicy.CLAMP
    strict_opcodes: bool = False
    rng_seed: Optional[int] = None
    rom_path: Optional[str] = None
