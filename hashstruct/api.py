from hashstruct.core.config import HashOptions
from hashstruct.core.hashing import hash_hex, hash_value
from hashstruct.core.hooks import Includable, IncludableMap
from hashstruct.core.sink import Crc64Sink, HashlibSink, Sink
from hashstruct.exceptions import (
    HashError,
    HookError,
    SinkWriteError,
    UnsupportedKindError,
)

def hash(value, options=None):
    return hash_value(value, options)


def hexdigest(value, options=None):
    return hash_hex(value, options)


__all__ = [
    "HashOptions",
    "hash",
    "hexdigest",
    "hash_value",
    "hash_hex",
    "Includable",
    "IncludableMap",
    "Sink",
    "Crc64Sink",
    "HashlibSink",
    "HashError",
    "HookError",
    "SinkWriteError",
    "UnsupportedKindError",
]
