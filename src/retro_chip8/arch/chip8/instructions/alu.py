# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

VF にフラグを書く命令は、結果を Vx に格納した後でフラグを書きます
（Vx が VF の場合はフラグが残ります）。
"""
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, VF
from .base import Instruction, ExecutionContext

# --- 7XNN ADD Vx, byte ---
# @intent:responsibility 定数加算。256で折り返し、フラグは変化させません。
def execute_add_byte(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.v[ins.x] = (state.v[ins.x] + ins.nn) & 0xFF

# --- 8XY0 LD Vx, Vy ---
def execute_ld_reg(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.v[ins.x] = state.v[ins.y]

# --- 8XY1 OR / 8XY2 AND / 8XY3 XOR ---
# @intent:responsibility 論理演算。Legacyモードでは副作用として VF を 0 にします。
def execute_or(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.v[ins.x] = state.v[ins.x] | state.v[ins.y]
    if ctx.quirks.logic_resets_vf:
        state.v[VF] = 0

def execute_and(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.v[ins.x] = state.v[ins.x] & state.v[ins.y]
    if ctx.quirks.logic_resets_vf:
        state.v[VF] = 0

def execute_xor(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.v[ins.x] = state.v[ins.x] ^ state.v[ins.y]
    if ctx.quirks.logic_resets_vf:
        state.v[VF] = 0

# --- 8XY4 ADD Vx, Vy ---
# @intent:responsibility レジスタ同士の加算。和が255を超えた場合 VF=1。
def execute_add_reg(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    total = state.v[ins.x] + state.v[ins.y]
    state.v[ins.x] = total & 0xFF
    state.v[VF] = 1 if total > 0xFF else 0

# --- 8XY5 SUB Vx, Vy ---
# @intent:responsibility Vx-Vy。ボローが無い (Vx >= Vy) 場合 VF=1。
def execute_sub(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    vx, vy = state.v[ins.x], state.v[ins.y]
    state.v[ins.x] = (vx - vy) & 0xFF
    state.v[VF] = 1 if vx >= vy else 0

# --- 8XY7 SUBN Vx, Vy ---
def execute_subn(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    vx, vy = state.v[ins.x], state.v[ins.y]
    state.v[ins.x] = (vy - vx) & 0xFF
    state.v[VF] = 1 if vy >= vx else 0

# --- 8XY6 SHR / 8XYE SHL ---
# @intent:responsibility シフト。Legacyモードでは Vy、Modernモードでは Vx をシフト元にします。
def _shift_source(state: Chip8CpuState, ins: Instruction, ctx: ExecutionContext) -> int:
    return state.v[ins.y] if ctx.quirks.shift_uses_vy else state.v[ins.x]

def execute_shr(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    source = _shift_source(state, ins, ctx)
    state.v[ins.x] = source >> 1
    state.v[VF] = source & 0x01

def execute_shl(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    source = _shift_source(state, ins, ctx)
    state.v[ins.x] = (source << 1) & 0xFF
    state.v[VF] = (source >> 7) & 0x01

# --- CXNN RND Vx, byte ---
# @intent:responsibility 一様乱数バイトと定数の論理積。乱数生成器はCPU生成時に一度だけシードされます。
def execute_rnd(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.v[ins.x] = ctx.rng.randrange(256) & ins.nn
