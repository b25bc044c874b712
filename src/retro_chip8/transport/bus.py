# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8の4KiBフラットアドレス空間を表します。
命令実行中の読み書きは記録され、1命令ごとのSnapshotに添付されます。
ROMロードやホスト側の参照（peek）は記録の対象外です。
"""
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Tuple
from dataclasses import dataclass
from enum import Enum

# @intent:responsibility 記録されたアクセスの向き。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:data_structure 命令実行中に発生した1バイト分のアクセス記録。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

# @intent:responsibility バスにマップできる記憶装置のインターフェース。アドレスはデバイス先頭からのオフセットです。
class Device(ABC):
    @property
    @abstractmethod
    def size(self) -> int:
        pass

    @abstractmethod
    def read(self, offset: int) -> int:
        pass

    @abstractmethod
    def write(self, offset: int, data: int) -> None:
        pass

    def clear(self) -> None:
        """デバイスの内容を初期化します。既定では何もしません。"""

# @intent:responsibility バイト配列で実装された読み書き可能なメモリ。
class RAM(Device):
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"RAM size must be a positive integer, got {size!r}.")
        self._cells = bytearray(size)

    @property
    def size(self) -> int:
        return len(self._cells)

    def _check(self, offset: int) -> None:
        if not 0 <= offset < len(self._cells):
            raise IndexError(f"Offset {offset} outside RAM of {len(self._cells)} bytes.")

    def read(self, offset: int) -> int:
        self._check(offset)
        return self._cells[offset]

    def write(self, offset: int, data: int) -> None:
        self._check(offset)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Value {data} does not fit in a byte.")
        self._cells[offset] = data

    # @intent:responsibility 全セルをゼロにします（リセット時のメモリ初期化）。
    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))


class _Region(NamedTuple):
    base: int
    device: Device

    @property
    def end(self) -> int:
        return self.base + self.device.size - 1

# @intent:responsibility アドレスをマップ済みデバイスへ振り分け、命令実行中のアクセスを記録します。
# @intent:rationale 範囲外アドレスはゲストの状態ではなくホスト側のバグとして IndexError で通知します。
class Bus:
    """
    メモリバス。

    map_device() で登録した領域は重複できません。
    read()/write() は記録され、drain_activity_log() で取り出すと記録は空になります。
    """
    def __init__(self):
        self._regions: List[_Region] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility デバイスを base から始まる領域にマップします。
    # @intent:pre-condition base は非負で、既存の領域と重ならない必要があります。
    def map_device(self, base: int, device: Device) -> None:
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a bus device.")
        if base < 0:
            raise ValueError(f"Base address {base} must not be negative.")
        region = _Region(base, device)
        for other in self._regions:
            if region.base <= other.end and other.base <= region.end:
                raise ValueError(
                    f"Region {region.base:#06x}-{region.end:#06x} overlaps {other.base:#06x}-{other.end:#06x}."
                )
        self._regions.append(region)

    def _resolve(self, address: int) -> Tuple[Device, int]:
        for region in self._regions:
            if region.base <= address <= region.end:
                return region.device, address - region.base
        raise IndexError(f"No device mapped at {address:#06x}.")

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:responsibility ホスト側からの参照用。アクセスは記録しません。
    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    # @intent:responsibility ローダー用のブロック書き込み。命令実行とは無関係なため記録しません。
    def load(self, address: int, data: bytes) -> None:
        for i, byte in enumerate(data):
            device, offset = self._resolve(address + i)
            device.write(offset, byte)

    # @intent:responsibility マップ済みの全デバイスを初期化し、アクセス記録も破棄します。
    def clear(self) -> None:
        for region in self._regions:
            region.device.clear()
        self._activity = []

    # @intent:responsibility これまでのアクセス記録を返し、記録を空にします。
    def drain_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity
