# hashstruct/core/sink.py
from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import Dict, List

MASK64 = 0xFFFFFFFFFFFFFFFF

# ECMA-182, bit-reflected (same table as CRC-64/XZ)
CRC64_ECMA = 0xC96C5795D7870F42

_CRC64_TABLES: Dict[int, List[int]] = {}


def _crc64_table(poly: int) -> List[int]:
    table = _CRC64_TABLES.get(poly)
    if table is not None:
        return table
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ poly
            else:
                crc >>= 1
        table.append(crc & MASK64)
    _CRC64_TABLES[poly] = table
    return table


class Sink(ABC):
    """
    Incremental 64-bit hash function fed by the walker.

    A sink is mutable: one instance must not be shared by overlapping
    hash calls.
    """

    @abstractmethod
    def write(self, data: bytes) -> None:
        ...

    @abstractmethod
    def reset(self) -> None:
        ...

    @abstractmethod
    def sum64(self) -> int:
        ...

    def new(self) -> "Sink":
        """Return a fresh, reset sink of the same configuration."""
        return type(self)()


class Crc64Sink(Sink):
    """CRC-64 with a reflected polynomial, init and final XOR all ones."""

    def __init__(self, poly: int = CRC64_ECMA) -> None:
        self.poly = poly
        self._table = _crc64_table(poly)
        self._crc = 0

    def write(self, data: bytes) -> None:
        table = self._table
        crc = ~self._crc & MASK64
        for byte in data:
            crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
        self._crc = ~crc & MASK64

    def reset(self) -> None:
        self._crc = 0

    def sum64(self) -> int:
        return self._crc

    def new(self) -> "Crc64Sink":
        return Crc64Sink(self.poly)


class HashlibSink(Sink):
    """
    Adapt a hashlib algorithm to the Sink interface.
    The digest is folded to its first 8 bytes, little-endian.
    """

    def __init__(self, algo: str = "blake2b", **kwargs) -> None:
        self.algo = algo
        self._kwargs = kwargs
        self._h = hashlib.new(algo, **kwargs)

    def write(self, data: bytes) -> None:
        self._h.update(data)

    def reset(self) -> None:
        self._h = hashlib.new(self.algo, **self._kwargs)

    def sum64(self) -> int:
        if self.algo.startswith("shake_"):
            digest = self._h.digest(8)
        else:
            digest = self._h.digest()
        return int.from_bytes(digest[:8], "little")

    def new(self) -> "HashlibSink":
        return HashlibSink(self.algo, **self._kwargs)


if __name__ == "__main__":
    s = Crc64Sink()
    s.write(b"123456789")
    print(f"{s.sum64():016x}")
