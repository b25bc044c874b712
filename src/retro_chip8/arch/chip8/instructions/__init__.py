"""
CHIP-8命令セット実装パッケージ。
"""
import logging

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.common.errors import UnimplementedOpcode
from .base import Instruction, ExecutionContext, decode, read_word
from .maps import INSTRUCTION_MAP, InstructionDef, dispatch_key

logger = logging.getLogger(__name__)

UNKNOWN_MNEMONIC = "UNKNOWN"

# @intent:responsibility オペコードに対応する命令定義を検索します。未定義ならNoneを返します。
def lookup(opcode: int):
    return INSTRUCTION_MAP.get(dispatch_key(opcode))

# @intent:responsibility CHIP-8のオペコードをデコードし、Operationオブジェクトを返します。
def decode_opcode(opcode: int) -> Operation:
    """
    オペコードをデコードし、ニーモニックとオペランド表記を含むOperationを返します。
    表記は命令テーブルの書式から生成されます。
    """
    ins = decode(opcode)
    definition = lookup(ins.opcode)
    if definition is None:
        return Operation(f"{ins.opcode:04X}", UNKNOWN_MNEMONIC, [f"${ins.opcode:04X}"], ins)
    fields = ins._asdict()
    operands = [template.format(**fields) for template in definition.operands]
    return Operation(f"{ins.opcode:04X}", definition.mnemonic, operands, ins)

# @intent:responsibility 任意のオペコードの表示用テキスト（例: "LD V0, #05"）を返します。
def describe(opcode: int) -> str:
    return decode_opcode(opcode).text

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:rationale 未実装オペコードは既定では何もしません（PCが進むのみ）。多くのROMがこの寛容な挙動に依存しています。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, ctx: ExecutionContext) -> None:
    ins = operation.instruction
    definition = lookup(ins.opcode)
    if definition is None:
        pc = (state.pc - operation.length) & 0xFFFF
        if ctx.strict_opcodes:
            raise UnimplementedOpcode(ins.opcode, pc)
        logger.debug("Unimplemented opcode %04X at PC %#05x treated as no-op", ins.opcode, pc)
        return
    definition.execute(state, bus, ins, ctx)
