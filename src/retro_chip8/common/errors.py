"""
例外定義モジュール。

ROMロード、コールスタック、未実装命令、設定ファイルに関するエラーを階層化して定義します。
"""
from typing import Optional


# @intent:responsibility 本パッケージが送出する全ての例外の基底クラス。
class Chip8Error(Exception):
    pass


# @intent:responsibility ROMロード時のエラーの基底クラス。起動時に呼び出し元へ伝播し、リトライはしません。
class RomError(Chip8Error):
    pass


class RomTooLarge(RomError):
    """プログラムがメモリのプログラム領域 (0x200-0xFFF) に収まらない。"""
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM is {size} bytes, but only {limit} bytes fit in program memory.")


class RomUnreadable(RomError):
    """ROMのバイト列を最後まで読み取れなかった。"""
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read ROM from {source}: {reason}")


# @intent:responsibility コールスタックの溢れ／空読みを表す例外の基底クラス。
# @intent:rationale 実機では未定義動作。既定のポリシー(clamp)では命令側で捕捉され、ログ出力のみ行われます。
class StackError(Chip8Error):
    def __init__(self, message: str, pc: Optional[int] = None):
        self.pc = pc
        super().__init__(message)


class StackOverflow(StackError):
    def __init__(self, pc: Optional[int] = None, depth: int = 0):
        self.depth = depth
        where = f" at PC {pc:#05x}" if pc is not None else ""
        super().__init__(f"Call stack overflow{where} (depth {depth}).", pc)


class StackUnderflow(StackError):
    def __init__(self, pc: Optional[int] = None):
        where = f" at PC {pc:#05x}" if pc is not None else ""
        super().__init__(f"Return with empty call stack{where}.", pc)


# @intent:responsibility 未実装オペコード。strict_opcodes が有効な場合にのみ送出されます。
class UnimplementedOpcode(Chip8Error):
    def __init__(self, opcode: int, pc: int):
        self.opcode = opcode
        self.pc = pc
        super().__init__(f"Unimplemented opcode {opcode:04X} at PC {pc:#05x}")


# @intent:responsibility 設定ファイルの内容が不正な場合のエラー。
class ConfigError(Chip8Error):
    pass
