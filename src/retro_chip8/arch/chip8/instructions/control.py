# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ、キー入力待ち）の実装。

実行時点で PC は既に次の命令（フェッチしたアドレス + 2）を指しています。
"""
import logging

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.common.errors import StackOverflow, StackUnderflow
from retro_chip8.common.types import StackPolicy
from .base import Instruction, ExecutionContext

logger = logging.getLogger(__name__)


# @intent:utility_function 条件が成立した場合に次の命令を1つ読み飛ばします。
def _skip_if(state: Chip8CpuState, condition: bool) -> None:
    if condition:
        state.pc = (state.pc + 2) & 0xFFFF

# @intent:utility_function リターンアドレスをスタックに積みます。
# @intent:rationale 溢れた場合、clampポリシーでは最上段を上書きしてカーソルを容量で止めます。
def push_return_address(state: Chip8CpuState, address: int, ctx: ExecutionContext) -> None:
    if state.sp >= len(state.stack):
        error = StackOverflow(pc=(state.pc - 2) & 0xFFFF, depth=state.sp)
        if ctx.stack_policy == StackPolicy.RAISE:
            raise error
        logger.warning("%s Overwriting the top entry.", error)
        state.stack[-1] = address
        return
    state.stack[state.sp] = address
    state.sp += 1

# @intent:utility_function スタックからリターンアドレスを取り出します。空の場合は None を返します（clampポリシー）。
def pop_return_address(state: Chip8CpuState, ctx: ExecutionContext):
    if state.sp == 0:
        error = StackUnderflow(pc=(state.pc - 2) & 0xFFFF)
        if ctx.stack_policy == StackPolicy.RAISE:
            raise error
        logger.warning("%s Continuing with the next instruction.", error)
        return None
    state.sp -= 1
    return state.stack[state.sp]

# --- 00EE RET ---
def execute_ret(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    address = pop_return_address(state, ctx)
    if address is not None:
        state.pc = address

# --- 1NNN JP ---
def execute_jp(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    state.pc = ins.nnn

# --- 2NNN CALL ---
def execute_call(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    push_return_address(state, state.pc, ctx)
    state.pc = ins.nnn

# --- 3XNN SE Vx, byte ---
def execute_se_byte(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    _skip_if(state, state.v[ins.x] == ins.nn)

# --- 4XNN SNE Vx, byte ---
def execute_sne_byte(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    _skip_if(state, state.v[ins.x] != ins.nn)

# --- 5XY0 SE Vx, Vy ---
def execute_se_reg(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    _skip_if(state, state.v[ins.x] == state.v[ins.y])

# --- 9XY0 SNE Vx, Vy ---
def execute_sne_reg(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    _skip_if(state, state.v[ins.x] != state.v[ins.y])

# --- BNNN JP V0, addr ---
# @intent:responsibility オフセット付きジャンプ。オフセットのレジスタは quirk (jump_uses_vx) で V0 か VX を選びます。
def execute_jp_offset(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    register = ins.x if ctx.quirks.jump_uses_vx else 0
    state.pc = (state.v[register] + ins.nnn) & 0xFFFF

# --- EX9E SKP Vx ---
def execute_skp(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    _skip_if(state, state.keypad[state.v[ins.x] & 0xF])

# --- EXA1 SKNP Vx ---
def execute_sknp(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    _skip_if(state, not state.keypad[state.v[ins.x] & 0xF])

# --- FX0A LD Vx, K ---
# @intent:responsibility キーが押されるまで同じ命令を再実行させ（PCを2戻す）、押下エッジを検出したらキー番号をVxに格納します。
# @intent:rationale 待機開始時点で既に押されているキーは対象外とし、レベルではなく押下の立ち上がりで判定します。
def execute_ld_vx_key(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    if state.awaiting_key is None:
        state.awaiting_key = ins.x
        state.key_wait_previous = list(state.keypad)
        state.pc = (state.pc - 2) & 0xFFFF
        return

    for key, (pressed, was_pressed) in enumerate(zip(state.keypad, state.key_wait_previous)):
        if pressed and not was_pressed:
            state.v[ins.x] = key
            state.awaiting_key = None
            return

    state.key_wait_previous = list(state.keypad)
    state.pc = (state.pc - 2) & 0xFFFF

# --- 0NNN SYS addr ---
# @intent:responsibility マシン語ルーチン呼び出し。実機固有のため無視します。
def execute_sys(state: Chip8CpuState, bus: Bus, ins: Instruction, ctx: ExecutionContext) -> None:
    logger.debug("Ignoring SYS %03X at PC %#05x", ins.nnn, (state.pc - 2) & 0xFFFF)
