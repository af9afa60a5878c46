# hashstruct/core/kinds.py
from __future__ import annotations

import asyncio
import collections
import dataclasses
import enum
import io
import multiprocessing.queues
import queue
import sys
import threading
import types
import weakref
from collections.abc import Mapping, Set
from typing import Any, Iterator, List, Optional, Tuple

# Optional NumPy support
try:
    import numpy as np
except ImportError:
    np = None


class Kind(enum.Enum):
    ABSENT = "absent"
    REFERENCE = "reference"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    SIZED = "sized"
    STRING = "string"
    BYTES = "bytes"
    ARRAY = "array"
    SEQUENCE = "sequence"
    SET = "set"
    MAPPING = "mapping"
    RECORD = "record"
    UNSUPPORTED = "unsupported"


BYTES_TYPES = (bytes, bytearray, memoryview)
SEQUENCE_TYPES = (list, collections.deque)

# Channels, streams and synchronisation primitives carry state that is
# not their content; user subclasses of these are rejected too.
OPAQUE_TYPES = (
    io.IOBase,
    asyncio.Queue,
    asyncio.Event,
    asyncio.Lock,
    asyncio.Condition,
    asyncio.Semaphore,
    queue.Queue,
    queue.SimpleQueue,
    multiprocessing.queues.Queue,
    multiprocessing.queues.SimpleQueue,
    threading.Thread,
    threading.Event,
    threading.Condition,
    threading.Semaphore,
    threading.Barrier,
    type(threading.Lock()),
    type(threading.RLock()),
)

_SLOT_SKIP = ("__dict__", "__weakref__")


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _is_library_type(cls: type) -> bool:
    root = (cls.__module__ or "").split(".")[0]
    return root == "builtins" or root in sys.stdlib_module_names


def _slot_names(cls: type) -> List[str]:
    """Slot names in declaration order, base classes first."""
    names: List[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in _SLOT_SKIP:
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            if name not in names:
                names.append(name)
    return names


def _is_plain_object(value: Any) -> bool:
    if isinstance(value, (type, types.ModuleType, OPAQUE_TYPES)) or callable(value):
        return False
    if _is_library_type(type(value)):
        return False
    return hasattr(value, "__dict__") or bool(_slot_names(type(value)))


def classify(value: Any) -> Kind:
    """Sort a value into exactly one Kind. Order of checks matters."""
    if value is None:
        return Kind.ABSENT

    if isinstance(value, (weakref.ref, enum.Enum)):
        return Kind.REFERENCE

    if isinstance(value, bool):
        return Kind.BOOL

    if np is not None:
        if isinstance(value, np.bool_):
            return Kind.BOOL
        if isinstance(value, np.number):
            return Kind.SIZED
        if isinstance(value, np.ndarray):
            return Kind.ARRAY

    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, complex):
        return Kind.COMPLEX

    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, BYTES_TYPES):
        return Kind.BYTES

    if _is_namedtuple(value) or _is_dataclass_instance(value):
        return Kind.RECORD

    if isinstance(value, tuple):
        return Kind.ARRAY
    if isinstance(value, SEQUENCE_TYPES):
        return Kind.SEQUENCE
    if isinstance(value, Set):
        return Kind.SET
    if isinstance(value, Mapping):
        return Kind.MAPPING

    if _is_plain_object(value):
        return Kind.RECORD

    return Kind.UNSUPPORTED


def dereference(value: Any) -> Any:
    """Unwrap one level of indirection. A dead weak reference yields None."""
    if isinstance(value, enum.Enum):
        return value.value
    return value()


def record_members(
    value: Any, tag_name: str
) -> Iterator[Tuple[str, Any, Optional[str]]]:
    """
    Yield (name, value, annotation) for each member of a record in
    declaration order. Only dataclass fields carry annotations.
    Plain objects yield their slots first, then their instance dict.
    """
    if _is_dataclass_instance(value):
        for f in dataclasses.fields(value):
            yield f.name, getattr(value, f.name), f.metadata.get(tag_name)
        return

    if _is_namedtuple(value):
        for name in type(value)._fields:
            yield name, getattr(value, name), None
        return

    for name in _slot_names(type(value)):
        # an unset slot hashes like an absent value
        yield name, getattr(value, name, None), None

    for name, member in list(getattr(value, "__dict__", {}).items()):
        yield name, member, None
