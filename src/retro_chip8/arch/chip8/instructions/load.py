# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード／ストア命令（レジスタ、インデックスレジスタ、タイマ、メモリ転送）の実装。
"""
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, FONT_ADDRESS
from retro_chip8.arch.chip8.font import GLYPH_HEIGHT
from .base import Instruction, ExecutionContext

# --- 6XNN LD Vx, byte ---
def execute_ld_byte(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.v[ins.x] = ins.nn

# --- ANNN LD I, addr ---
def execute_ld_i(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.i = ins.nnn

# --- FX07 LD Vx, DT ---
def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.v[ins.x] = state.delay_timer

# --- FX15 LD DT, Vx ---
def execute_ld_dt(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.delay_timer = state.v[ins.x]

# --- FX18 LD ST, Vx ---
def execute_ld_st(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.sound_timer = state.v[ins.x]

# --- FX1E ADD I, Vx ---
# @intent:responsibility インデックスレジスタへの加算。フラグは変化させません。
def execute_add_i(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.i = (state.i + state.v[ins.x]) & 0xFFFF

# --- FX29 LD F, Vx ---
# @intent:responsibility Vx番のフォントグリフのアドレスを I に設定します（5バイト/グリフ、オフセット0）。
def execute_ld_font(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.i = (FONT_ADDRESS + state.v[ins.x] * GLYPH_HEIGHT) & 0xFFFF

# --- FX33 LD B, Vx ---
# @intent:responsibility Vx の10進表現（百・十・一の位）を I, I+1, I+2 に書き込みます。
def execute_ld_bcd(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    value = state.v[ins.x]
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# --- FX55 LD [I], Vx ---
# @intent:responsibility V0..Vx を I から始まるメモリに書き込みます。Legacyモードでは I を X+1 進めます。
def execute_store_registers(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    for offset in range(ins.x + 1):
        bus.write(state.i + offset, state.v[offset])
    if ctx.quirks.load_store_increments_i:
        state.i = (state.i + ins.x + 1) & 0xFFFF

# --- FX65 LD Vx, [I] ---
def execute_load_registers(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    for offset in range(ins.x + 1):
        state.v[offset] = bus.read(state.i + offset)
    if ctx.quirks.load_store_increments_i:
        state.i = (state.i + ins.x + 1) & 0xFFFF
