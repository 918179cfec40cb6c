# tests/transport/test_memory_bus.py
"""
chip8_core.transport.busモジュールの単体テスト。
"""
import pytest
from chip8_core.transport.bus import Bus, Device, RAM, BusAccessType

# @intent:test_suite 共通バスとRAMデバイスの基本的な機能とエラーハンドリングを検証します。

class TestRAM:
    """
    RAMデバイスの単体テスト。
    """
    def test_ram_init_valid_size(self):
        ram = RAM(16)
        assert ram.get_size() == 16
        assert all(ram.read(i) == 0 for i in range(16))

    def test_ram_init_invalid_size(self):
        with pytest.raises(ValueError, match="RAM size must be a positive integer"):
            RAM(0)
        with pytest.raises(ValueError, match="RAM size must be a positive integer"):
            RAM(1.5)

    def test_ram_read_write_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(IndexError, match="Offset 4 is outside RAM of 4 bytes."):
            ram.read(4)
        with pytest.raises(IndexError):
            ram.write(-1, 0x00)

    # @intent:test_case_data 8bitを超える値の書き込みはValueErrorになることを検証します。
    def test_ram_write_invalid_data(self):
        ram = RAM(1)
        with pytest.raises(ValueError, match="Value 256 does not fit in a byte."):
            ram.write(0, 0x100)

    def test_ram_clear(self):
        ram = RAM(8)
        ram.write(3, 0x55)
        ram.clear()
        assert ram.read(3) == 0

class TestBus:
    """
    Busの単体テスト。
    """
    @pytest.fixture
    def bus(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        return bus

    def test_read_write_is_logged(self, bus):
        bus.write(0x300, 0xAA)
        assert bus.read(0x300) == 0xAA

        log = bus.get_and_clear_activity_log()
        assert [(a.address, a.data, a.access_type) for a in log] == [
            (0x300, 0xAA, BusAccessType.WRITE),
            (0x300, 0xAA, BusAccessType.READ),
        ]
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_peek peekとloadはアクティビティログに残らないことを検証します。
    def test_peek_and_load_are_not_logged(self, bus):
        bus.load(0x200, bytes([0x12, 0x34, 0x56]))
        assert bus.peek(0x201) == 0x34
        assert bus.get_and_clear_activity_log() == []

    def test_access_unmapped_address(self, bus):
        with pytest.raises(IndexError, match=r"No device mapped at \$1000."):
            bus.read(0x1000)
        with pytest.raises(IndexError):
            bus.load(0xFFF, bytes([1, 2]))

    # @intent:test_case_block 複数デバイスにまたがるロードは何も書き込まずに拒否されることを検証します。
    def test_load_across_devices(self):
        bus = Bus()
        low, high = RAM(0x10), RAM(0x10)
        bus.register_device(0x00, 0x0F, low)
        bus.register_device(0x10, 0x1F, high)
        with pytest.raises(IndexError, match="crosses a device boundary"):
            bus.load(0x0E, bytes([1, 2, 3]))
        assert low.read(0x0E) == 0

        bus.load(0x12, bytes([7, 8]))
        assert high.read(0x02) == 7
        assert high.read(0x03) == 8

    def test_register_invalid_range(self):
        bus = Bus()
        with pytest.raises(ValueError, match="Invalid address range"):
            bus.register_device(0x0010, 0x000F, RAM(16))

    def test_register_size_mismatch(self):
        bus = Bus()
        with pytest.raises(ValueError, match="RAM holds 10 bytes but the range"):
            bus.register_device(0x0000, 0x000F, RAM(10))

    def test_register_non_device(self):
        bus = Bus()
        with pytest.raises(TypeError):
            bus.register_device(0x0000, 0x000F, bytearray(16))

    def test_get_devices(self, bus):
        devices = bus.get_devices()
        assert len(devices) == 1
        assert isinstance(devices[0], Device)
