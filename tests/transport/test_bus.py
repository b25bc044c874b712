# tests/transport/test_bus.py
"""
retro_chip8.transport.busモジュールの単体テスト。
"""
import pytest
from retro_chip8.transport.bus import Bus, BusAccess, BusAccessType, Device, RAM

# @intent:test_suite RAMデバイスとメモリバスの読み書き、領域のマップ、アクセス記録、ローダー用の操作を検証します。

class TestRAM:
    """
    RAMデバイスの単体テスト。
    """
    def test_ram_init_valid_size(self):
        ram = RAM(0x1000)
        assert ram.size == 0x1000
        assert ram.read(0xFFF) == 0

    @pytest.mark.parametrize("size", [0, -1, 1.5])
    def test_ram_init_invalid_size(self, size):
        with pytest.raises(ValueError, match="RAM size must be a positive integer"):
            RAM(size)

    # @intent:test_case_oob 範囲外オフセットへのアクセス時にIndexErrorが発生することを検証します。
    def test_ram_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(IndexError, match="Offset 4 outside RAM of 4 bytes."):
            ram.read(4)
        with pytest.raises(IndexError, match="Offset -1 outside RAM of 4 bytes."):
            ram.write(-1, 0x00)

    def test_ram_write_invalid_data(self):
        ram = RAM(1)
        with pytest.raises(ValueError, match="Value 256 does not fit in a byte."):
            ram.write(0, 0x100)

    def test_ram_clear(self):
        ram = RAM(4)
        ram.write(2, 0x7F)
        ram.clear()
        assert [ram.read(a) for a in range(4)] == [0, 0, 0, 0]


class TestBus:
    """
    Busの単体テスト。
    """
    @pytest.fixture
    def bus(self):
        bus = Bus()
        bus.map_device(0x000, RAM(0x1000))
        return bus

    def test_read_write(self, bus):
        bus.write(0x0200, 0xAA)
        assert bus.read(0x0200) == 0xAA

    # @intent:test_case_unmapped 4KiBを超えるアドレスはどのデバイスにもマップされていないことを検証します。
    def test_unmapped_address(self, bus):
        with pytest.raises(IndexError, match="No device mapped at 0x1000."):
            bus.read(0x1000)
        with pytest.raises(IndexError):
            bus.write(0x1000, 0x00)

    def test_map_at_offset(self):
        bus = Bus()
        ram = RAM(16)
        bus.map_device(0x100, ram)
        bus.write(0x105, 0x42)
        assert ram.read(5) == 0x42
        with pytest.raises(IndexError):
            bus.read(0x0FF)
        with pytest.raises(IndexError):
            bus.read(0x110)

    def test_map_negative_base(self):
        with pytest.raises(ValueError):
            Bus().map_device(-1, RAM(16))

    def test_map_overlapping_regions(self):
        bus = Bus()
        bus.map_device(0x000, RAM(16))
        with pytest.raises(ValueError, match="overlaps"):
            bus.map_device(0x00F, RAM(16))
        bus.map_device(0x010, RAM(16))

    def test_map_invalid_device_type(self):
        class NotADevice:
            pass
        with pytest.raises(TypeError):
            Bus().map_device(0x0000, NotADevice())

    def test_custom_device(self):
        class ConstantDevice(Device):
            @property
            def size(self):
                return 2

            def read(self, offset):
                return 0x5A

            def write(self, offset, data):
                pass

        bus = Bus()
        bus.map_device(0x000, ConstantDevice())
        assert bus.read(0x001) == 0x5A
        bus.clear()
        assert bus.peek(0x000) == 0x5A

    # @intent:test_case_log 読み書きが順に記録され、取得時にクリアされることを検証します。
    def test_activity_log(self, bus):
        bus.write(0x300, 0x12)
        bus.read(0x300)
        log = bus.drain_activity_log()
        assert log == [
            BusAccess(0x300, 0x12, BusAccessType.WRITE),
            BusAccess(0x300, 0x12, BusAccessType.READ),
        ]
        assert bus.drain_activity_log() == []

    def test_peek_is_not_logged(self, bus):
        bus.write(0x300, 0x34)
        bus.drain_activity_log()
        assert bus.peek(0x300) == 0x34
        assert bus.drain_activity_log() == []

    def test_load_block(self, bus):
        bus.load(0x200, b"\x01\x02\x03")
        assert [bus.peek(0x200 + k) for k in range(3)] == [1, 2, 3]
        assert bus.drain_activity_log() == []

    def test_load_past_end_raises(self, bus):
        with pytest.raises(IndexError):
            bus.load(0xFFF, b"\x01\x02")

    def test_clear(self, bus):
        bus.write(0x123, 0x45)
        bus.clear()
        assert bus.peek(0x123) == 0
        assert bus.drain_activity_log() == []
