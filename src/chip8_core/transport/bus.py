# chip8_core/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8の4KBアドレス空間をデバイス（RAM）に対応付け、
命令実行中のメモリアクセスを記録します。記録はstepごとにSnapshotへ渡されます。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Tuple

class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 1回のメモリアクセス（アドレス・値・種別）を記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

# @intent:responsibility バスに接続できる記憶デバイスのインターフェースを定義します。
class Device(ABC):
    """
    アドレスはデバイス先頭からのオフセットで渡されます。
    """
    @abstractmethod
    def read(self, offset: int) -> int:
        pass

    @abstractmethod
    def write(self, offset: int, data: int) -> None:
        pass

    @abstractmethod
    def get_size(self) -> int:
        pass

    # @intent:responsibility 連続したバイト列を書き込みます。既定の実装は1バイトずつwriteします。
    def write_block(self, offset: int, data: bytes) -> None:
        for index, value in enumerate(data):
            self.write(offset + index, value)

# @intent:responsibility バイト配列で実装された読み書き可能なメモリ。
class RAM(Device):
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"RAM size must be a positive integer, got {size!r}.")
        self._cells = bytearray(size)

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset < len(self._cells):
            raise IndexError(f"Offset {offset} is outside RAM of {len(self._cells)} bytes.")

    def read(self, offset: int) -> int:
        self._check_offset(offset)
        return self._cells[offset]

    def write(self, offset: int, data: int) -> None:
        self._check_offset(offset)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Value {data} does not fit in a byte.")
        self._cells[offset] = data

    # @intent:responsibility スライス代入でまとめて書き込みます。範囲外の場合は何も書き込みません。
    def write_block(self, offset: int, data: bytes) -> None:
        if data:
            self._check_offset(offset)
            self._check_offset(offset + len(data) - 1)
        self._cells[offset:offset + len(data)] = data

    # @intent:responsibility メモリ全体をゼロで埋めます（電源投入時の状態）。
    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))

    def get_size(self) -> int:
        return len(self._cells)

class MappedRegion(NamedTuple):
    start: int
    end: int
    device: Device

    def contains(self, address: int) -> bool:
        return self.start <= address <= self.end

# @intent:responsibility アドレスをデバイスに振り分け、命令実行中のアクセスを記録する共通バス。
class Bus:
    """
    read/writeはアクセスログに残り、peek/loadは残りません。
    peekはUIなどの観測用、loadはプログラムやフォントの配置用です。
    """
    def __init__(self):
        self._regions: List[MappedRegion] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility アドレス範囲 [start_address, end_address] にデバイスを割り当てます。
    # @intent:pre-condition 範囲の大きさはデバイスのサイズと一致している必要があります。重複は検査しません。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not isinstance(device, Device):
            raise TypeError(f"Cannot map {type(device).__name__}: not a Device.")
        if start_address < 0 or end_address < start_address:
            raise ValueError(f"Invalid address range ${start_address:X}-${end_address:X}.")
        span = end_address - start_address + 1
        if device.get_size() != span:
            raise ValueError(
                f"{type(device).__name__} holds {device.get_size()} bytes "
                f"but the range ${start_address:X}-${end_address:X} spans {span}."
            )
        self._regions.append(MappedRegion(start_address, end_address, device))

    def get_devices(self) -> List[Device]:
        return [region.device for region in self._regions]

    def _resolve(self, address: int) -> Tuple[Device, int]:
        for region in self._regions:
            if region.contains(address):
                return region.device, address - region.start
        raise IndexError(f"No device mapped at ${address:04X}.")

    # @intent:responsibility 前回の呼び出し以降に記録されたアクセスを返し、記録を空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    # @intent:responsibility バイト列を1つのデバイス内に連続して配置します（ログ記録なし）。
    # @intent:pre-condition 書き込み範囲全体が同じデバイスに収まっている必要があります。
    def load(self, address: int, data: bytes) -> None:
        if not data:
            return
        device, offset = self._resolve(address)
        last_device, _ = self._resolve(address + len(data) - 1)
        if last_device is not device:
            raise IndexError(f"Block of {len(data)} bytes at ${address:04X} crosses a device boundary.")
        device.write_block(offset, bytes(data))
