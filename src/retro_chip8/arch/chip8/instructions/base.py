# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ（オペコードのデコードと実行コンテキスト）。
"""
import random
from dataclasses import dataclass, field
from typing import NamedTuple

from retro_chip8.arch.chip8.quirks import Quirks
from retro_chip8.common.types import StackPolicy

# @intent:data_structure 16ビットのオペコードを各フィールドに分解したビュー。毎サイクル再計算され、保持されません。
class Instruction(NamedTuple):
    opcode: int  # 16ビットのオペコード全体
    nnn: int     # 下位12ビット (アドレス／定数)
    nn: int      # 下位8ビット (バイト定数)
    n: int       # 下位4ビット (ニブル定数)
    x: int       # ビット8-11 (第1レジスタ番号)
    y: int       # ビット4-7 (第2レジスタ番号)

# @intent:responsibility 16ビットのワードを命令フィールドに分解します。全ての値が構文上有効な命令です。
def decode(word: int) -> Instruction:
    word &= 0xFFFF
    return Instruction(
        opcode=word,
        nnn=word & 0x0FFF,
        nn=word & 0x00FF,
        n=word & 0x000F,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
    )

# @intent:responsibility 命令実行時に参照する、状態以外の構成情報（quirk、乱数生成器、エラーポリシー）を保持します。
@dataclass
class ExecutionContext:
    quirks: Quirks = field(default_factory=Quirks)
    rng: random.Random = field(default_factory=random.Random)
    stack_policy: StackPolicy = StackPolicy.CLAMP
    strict_opcodes: bool = False

# @intent:utility_function バスから16ビットワードをビッグエンディアン形式で読み込みます。
def read_word(bus, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read(addr) << 8) | bus.read(addr + 1)
