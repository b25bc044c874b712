# src/retro_chip8/arch/chip8/quirks.py
"""
拡張モード（Legacy / Modern）ごとの命令挙動の差異（quirk）を定義します。
"""
from dataclasses import dataclass, replace
from typing import Optional

from retro_chip8.common.types import ExtensionMode

# @intent:responsibility 4つの命令ファミリと描画端の扱いについて、実際に使われる挙動を保持します。
@dataclass(frozen=True)
class Quirks:
    """
    logic_resets_vf:          8XY1/8XY2/8XY3 が副作用として VF を 0 にする
    shift_uses_vy:            8XY6/8XYE のシフト元が Vy (False なら Vx)
    load_store_increments_i:  FX55/FX65 の後に I を X+1 進める
    jump_uses_vx:             BNNN のオフセットに VX を使う (False なら V0)
    clip_sprites:             画面端で描画を打ち切る (False なら折り返す)
    """
    logic_resets_vf: bool = True
    shift_uses_vy: bool = True
    load_store_increments_i: bool = True
    jump_uses_vx: bool = False
    clip_sprites: bool = True

    # @intent:responsibility 拡張モードの既定値から Quirks を生成し、None 以外の上書き値を適用します。
    @classmethod
    def for_mode(cls, mode: ExtensionMode, **overrides: Optional[bool]) -> "Quirks":
        if mode == ExtensionMode.LEGACY:
            quirks = cls()
        else:
            quirks = cls(
                logic_resets_vf=False,
                shift_uses_vy=False,
                load_store_increments_i=False,
            )
        changes = {name: value for name, value in overrides.items() if value is not None}
        if changes:
            quirks = replace(quirks, **changes)
        return quirks
