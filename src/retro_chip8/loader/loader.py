# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
フォントデータとプログラムバイナリ（生のマシン語）をメモリの固定オフセットに配置します。
"""
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.font import FONT_SET
from retro_chip8.arch.chip8.state import Chip8CpuState, FONT_ADDRESS, PROGRAM_START, MAX_ROM_SIZE
from retro_chip8.common.types import RunState
from retro_chip8.common.errors import RomTooLarge, RomUnreadable

logger = logging.getLogger(__name__)

RomSource = Union[bytes, bytearray, str, Path, BinaryIO]


class RomLoader:
    """
    ROMのバイト列を検証し、フォントと共にバスへロードするローダー。
    同じ入力で何度呼び出しても同じメモリ内容になります（リセット時の再ロードに使用）。
    """
    # @intent:responsibility バイト列、ファイルパス、またはバイナリストリームからROMを読み取ります。
    # @intent:post-condition 読み取りに失敗した場合は RomUnreadable を送出します。
    def read(self, source: RomSource) -> bytes:
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        if isinstance(source, (str, Path)):
            path = Path(source)
            try:
                with open(path, "rb") as f:
                    return f.read()
            except OSError as e:
                raise RomUnreadable(str(path), e.strerror or str(e)) from e
        try:
            data = source.read()
        except (OSError, ValueError) as e:
            raise RomUnreadable(getattr(source, "name", repr(source)), str(e)) from e
        except (AttributeError, TypeError) as e:
            raise RomUnreadable(repr(source), "not a path, bytes or binary stream") from e
        if not isinstance(data, (bytes, bytearray)):
            raise RomUnreadable(getattr(source, "name", repr(source)), "stream did not return bytes")
        return bytes(data)

    # @intent:responsibility プログラムがプログラム領域 (0x200-0xFFF) に収まるか検証します。
    def validate(self, data: bytes) -> None:
        if len(data) > MAX_ROM_SIZE:
            raise RomTooLarge(len(data), MAX_ROM_SIZE)

    # @intent:responsibility メモリを初期化し、フォントを0x000に、プログラムを0x200に書き込みます。
    # @intent:pre-condition プログラム長は 4096 - 0x200 バイト以下である必要があります。
    # @intent:post-condition state が渡された場合、PC=0x200、スタック空、実行状態RUNNINGに設定します。
    def load_bytes(self, data: bytes, bus: Bus, state: Optional[Chip8CpuState] = None) -> int:
        self.validate(data)

        bus.clear()
        bus.load(FONT_ADDRESS, FONT_SET)
        bus.load(PROGRAM_START, data)
        logger.info("Loaded %d byte program at %#05x", len(data), PROGRAM_START)

        if state is not None:
            state.pc = PROGRAM_START
            state.sp = 0
            state.run_state = RunState.RUNNING
        return len(data)

    def load(self, source: RomSource, bus: Bus, state: Optional[Chip8CpuState] = None) -> bytes:
        """
        ROMを読み取ってバスにロードし、ロードしたバイト列を返します（リセット時の再ロード用）。
        """
        data = self.read(source)
        self.load_bytes(data, bus, state)
        return data
