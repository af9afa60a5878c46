# hashstruct/core/hashing.py
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Any, Optional

from hashstruct.core.config import HashOptions
from hashstruct.core.hooks import Includable, IncludableMap
from hashstruct.core.kinds import Kind, classify, dereference, np, record_members
from hashstruct.core.sink import Sink
from hashstruct.exceptions import HookError, SinkWriteError, UnsupportedKindError

logger = logging.getLogger(__name__)

TAG_IGNORE = "ignore"
TAG_SET = "set"

_INT8 = struct.Struct("<b")
_INT64 = struct.Struct("<q")
_UINT64 = struct.Struct("<Q")
_FLOAT64 = struct.Struct("<d")
_COMPLEX128 = struct.Struct("<dd")

_INT64_MIN = -(1 << 63)
_INT64_LIMIT = 1 << 63
_UINT64_LIMIT = 1 << 64


@dataclass(frozen=True)
class VisitContext:
    order_independent: bool = False
    record: Any = None
    field: Optional[str] = None


_EMPTY = VisitContext()


def hash_value(value: Any, options: Optional[HashOptions] = None) -> int:
    """
    Deterministically hash an arbitrary nested value to an unsigned 64-bit int.

    Mapping entries, sets and "set"-annotated sequences are combined with
    XOR, so their enumeration order does not affect the result. Raises a
    HashError subclass on failure. Without options, defaults come from
    HashOptions.load() and so honour HASHSTRUCT_TAG_NAME.
    """
    opts = (options or HashOptions.load()).resolved()
    digest = _hash(value, opts.sink, opts.tag_name)
    logger.debug("hashed %s -> %016x", type(value).__name__, digest)
    return digest


def hash_hex(value: Any, options: Optional[HashOptions] = None) -> str:
    """Return the digest as 16 lowercase hex chars."""
    return f"{hash_value(value, options):016x}"


def _hash(value: Any, sink: Sink, tag_name: str) -> int:
    sink.reset()
    _Walker(sink, tag_name).visit(value, _EMPTY)
    return sink.sum64()


class _Walker:
    def __init__(self, sink: Sink, tag_name: str) -> None:
        self.sink = sink
        self.tag_name = tag_name

    # ---- helpers ----

    def _write(self, data: bytes) -> None:
        try:
            self.sink.write(data)
        except Exception as e:
            raise SinkWriteError(f"sink write failed: {e}") from e

    def _subhash(self, value: Any) -> int:
        # fresh sink per element, siblings never share state
        return _hash(value, self.sink.new(), self.tag_name)

    def _write_unordered(self, items) -> None:
        h = 0
        for item in items:
            h ^= self._subhash(item)
        self._write(_UINT64.pack(h))

    # ---- visitor ----

    def visit(self, value: Any, ctx: VisitContext) -> None:
        kind = classify(value)
        while kind is Kind.REFERENCE:
            value = dereference(value)
            kind = classify(value)

        if kind is Kind.ABSENT:
            self._write(_INT8.pack(0))

        elif kind is Kind.BOOL:
            self._write(_INT8.pack(1 if value else 0))

        elif kind is Kind.INT:
            if _INT64_MIN <= value < _INT64_LIMIT:
                self._write(_INT64.pack(value))
            elif _INT64_LIMIT <= value < _UINT64_LIMIT:
                self._write(_UINT64.pack(value))
            else:
                raise UnsupportedKindError("int", "out of 64-bit range")

        elif kind is Kind.FLOAT:
            self._write(_FLOAT64.pack(value))

        elif kind is Kind.COMPLEX:
            self._write(_COMPLEX128.pack(value.real, value.imag))

        elif kind is Kind.SIZED:
            little = np.asarray(value).astype(value.dtype.newbyteorder("<"))
            self._write(little.tobytes())

        elif kind is Kind.STRING:
            self._write(value.encode("utf-8"))

        elif kind is Kind.BYTES:
            data = bytes(value)
            if ctx.order_independent:
                self._write_unordered(data[i : i + 1] for i in range(len(data)))
            else:
                self._write(data)

        elif kind is Kind.ARRAY:
            self._visit_array(value)

        elif kind is Kind.SEQUENCE:
            if ctx.order_independent:
                self._write_unordered(value)
            else:
                for item in value:
                    self.visit(item, _EMPTY)

        elif kind is Kind.SET:
            self._write_unordered(value)

        elif kind is Kind.MAPPING:
            self._visit_mapping(value, ctx)

        elif kind is Kind.RECORD:
            self._visit_record(value)

        else:
            raise UnsupportedKindError(type(value).__name__)

    def _visit_array(self, value: Any) -> None:
        if np is not None and isinstance(value, np.ndarray) and value.ndim == 0:
            self.visit(value[()], _EMPTY)
            return
        for item in value:
            self.visit(item, _EMPTY)

    def _visit_mapping(self, value: Any, ctx: VisitContext) -> None:
        include_map = None
        if isinstance(ctx.record, IncludableMap):
            include_map = ctx.record

        h = 0
        for key, item in value.items():
            if include_map is not None:
                try:
                    include = include_map.should_hash_map_entry(ctx.field, key, item)
                except Exception as e:
                    raise HookError("should_hash_map_entry", ctx.field, key) from e
                if not include:
                    logger.debug("skipping entry %r of field %s", key, ctx.field)
                    continue

            # pair key and value before folding into the total
            h ^= self._subhash(key) ^ self._subhash(item)

        self._write(_UINT64.pack(h))

    def _visit_record(self, value: Any) -> None:
        include = value if isinstance(value, Includable) else None

        for name, member, tag in record_members(value, self.tag_name):
            if name.startswith("_"):
                continue
            if tag == TAG_IGNORE:
                continue

            if include is not None:
                try:
                    keep = include.should_hash_field(name, member)
                except Exception as e:
                    raise HookError("should_hash_field", name) from e
                if not keep:
                    logger.debug(
                        "skipping field %s of %s", name, type(value).__name__
                    )
                    continue

            self.visit(
                member,
                VisitContext(
                    order_independent=(tag == TAG_SET),
                    record=value,
                    field=name,
                ),
            )


if __name__ == "__main__":
    print(hash_hex({"a": 1, "b": [True, None, 3.14]}))
