# src/retro_chip8/arch/chip8/instructions/display.py
"""
画面命令（消去、スプライト描画と衝突判定）の実装。
"""
from typing import Sequence

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, VF
from retro_chip8.common.types import Framebuffer
from .base import Instruction, ExecutionContext

SPRITE_WIDTH = 8

# @intent:responsibility スプライトをフレームバッファにXOR合成し、点灯していた画素が消えたかどうかを返します。
# @intent:pre-condition rows の各要素は8ビット値で、最上位ビットが左端の画素に対応します。
def draw_sprite(framebuffer: Framebuffer, x: int, y: int, rows: Sequence[int], clip: bool = True) -> bool:
    """
    (x, y) を左上としてスプライトを描画します。原点は画面サイズで折り返されます。

    clip=True の場合、右端・下端を越える画素は描画されません。
    clip=False の場合、越えた画素は反対側に折り返して描画されます。
    """
    height = len(framebuffer)
    width = len(framebuffer[0]) if height else 0
    origin_x = x % width
    origin_y = y % height
    collision = False

    for row_index, row_bits in enumerate(rows):
        py = origin_y + row_index
        if py >= height:
            if clip:
                break
            py %= height
        line = framebuffer[py]
        for bit in range(SPRITE_WIDTH):
            if not (row_bits >> (7 - bit)) & 0x01:
                continue
            px = origin_x + bit
            if px >= width:
                if clip:
                    break
                px %= width
            if line[px]:
                collision = True
            line[px] = not line[px]

    return collision

# --- 00E0 CLS ---
def execute_cls(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.clear_framebuffer()
    state.draw_flag = True

# --- DXYN DRW Vx, Vy, nibble ---
# @intent:responsibility I から N バイトのスプライトを (Vx, Vy) に描画し、衝突フラグを VF に設定します。
def execute_drw(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    x = state.v[ins.x]
    y = state.v[ins.y]
    rows = [bus.read(state.i + offset) for offset in range(ins.n)]
    state.v[VF] = 0
    collided = draw_sprite(state.framebuffer, x, y, rows, clip=ctx.quirks.clip_sprites)
    state.v[VF] = 1 if collided else 0
    state.draw_flag = True
