# src/retro_chip8/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。

ニーモニック・オペランド書式・実行関数を1つのテーブルで管理し、
トレース表示も同じテーブルから生成します。
"""
from typing import Callable, Dict, NamedTuple, Tuple

from . import alu
from . import control
from . import display
from . import load

# @intent:data_structure 1命令分の定義。operands は Instruction のフィールド名で展開される書式文字列です。
class InstructionDef(NamedTuple):
    mnemonic: str
    operands: Tuple[str, ...]
    execute: Callable

# @intent:responsibility オペコードからテーブル検索用のキーを求めます。
# @intent:rationale 上位ニブルで分類し、0/8/E/F 系は下位ニブルまたは下位バイトで二段目の分類を行います。
def dispatch_key(opcode: int) -> int:
    family = opcode & 0xF000
    if family == 0x0000:
        return opcode if opcode in (0x00E0, 0x00EE) else 0x0000
    if family in (0x5000, 0x8000, 0x9000):
        return opcode & 0xF00F
    if family in (0xE000, 0xF000):
        return opcode & 0xF0FF
    return family

# @intent:map ディスパッチキーから命令定義へのマッピングテーブル。
INSTRUCTION_MAP: Dict[int, InstructionDef] = {
    # Display / Control
    0x00E0: InstructionDef("CLS", (), display.execute_cls),
    0x00EE: InstructionDef("RET", (), control.execute_ret),
    0x0000: InstructionDef("SYS", ("${nnn:03X}",), control.execute_sys),
    0x1000: InstructionDef("JP", ("${nnn:03X}",), control.execute_jp),
    0x2000: InstructionDef("CALL", ("${nnn:03X}",), control.execute_call),
    0x3000: InstructionDef("SE", ("V{x:X}", "#{nn:02X}"), control.execute_se_byte),
    0x4000: InstructionDef("SNE", ("V{x:X}", "#{nn:02X}"), control.execute_sne_byte),
    0x5000: InstructionDef("SE", ("V{x:X}", "V{y:X}"), control.execute_se_reg),
    0x9000: InstructionDef("SNE", ("V{x:X}", "V{y:X}"), control.execute_sne_reg),
    0xB000: InstructionDef("JP", ("V0", "${nnn:03X}"), control.execute_jp_offset),

    # Load
    0x6000: InstructionDef("LD", ("V{x:X}", "#{nn:02X}"), load.execute_ld_byte),
    0xA000: InstructionDef("LD", ("I", "${nnn:03X}"), load.execute_ld_i),

    # ALU
    0x7000: InstructionDef("ADD", ("V{x:X}", "#{nn:02X}"), alu.execute_add_byte),
    0x8000: InstructionDef("LD", ("V{x:X}", "V{y:X}"), alu.execute_ld_reg),
    0x8001: InstructionDef("OR", ("V{x:X}", "V{y:X}"), alu.execute_or),
    0x8002: InstructionDef("AND", ("V{x:X}", "V{y:X}"), alu.execute_and),
    0x8003: InstructionDef("XOR", ("V{x:X}", "V{y:X}"), alu.execute_xor),
    0x8004: InstructionDef("ADD", ("V{x:X}", "V{y:X}"), alu.execute_add_reg),
    0x8005: InstructionDef("SUB", ("V{x:X}", "V{y:X}"), alu.execute_sub),
    0x8006: InstructionDef("SHR", ("V{x:X}", "V{y:X}"), alu.execute_shr),
    0x8007: InstructionDef("SUBN", ("V{x:X}", "V{y:X}"), alu.execute_subn),
    0x800E: InstructionDef("SHL", ("V{x:X}", "V{y:X}"), alu.execute_shl),
    0xC000: InstructionDef("RND", ("V{x:X}", "#{nn:02X}"), alu.execute_rnd),

    # Draw
    0xD000: InstructionDef("DRW", ("V{x:X}", "V{y:X}", "{n}"), display.execute_drw),

    # Keypad
    0xE09E: InstructionDef("SKP", ("V{x:X}",), control.execute_skp),
    0xE0A1: InstructionDef("SKNP", ("V{x:X}",), control.execute_sknp),
    0xF00A: InstructionDef("LD", ("V{x:X}", "K"), control.execute_ld_vx_key),

    # Timers / Index / Memory
    0xF007: InstructionDef("LD", ("V{x:X}", "DT"), load.execute_ld_vx_dt),
    0xF015: InstructionDef("LD", ("DT", "V{x:X}"), load.execute_ld_dt),
    0xF018: InstructionDef("LD", ("ST", "V{x:X}"), load.execute_ld_st),
    0xF01E: InstructionDef("ADD", ("I", "V{x:X}"), load.execute_add_i),
    0xF029: InstructionDef("LD", ("F", "V{x:X}"), load.execute_ld_font),
    0xF033: InstructionDef("LD", ("B", "V{x:X}"), load.execute_ld_bcd),
    0xF055: InstructionDef("LD", ("[I]", "V{x:X}"), load.execute_store_registers),
    0xF065: InstructionDef("LD", ("V{x:X}", "[I]"), load.execute_load_registers),
}
