# hashstruct/core/hooks.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Includable(ABC):
    """
    Optional capability of a record: decide per member whether it is hashed.

    Consulted after the "ignore" annotation check and before descending
    into the member. Raising aborts the whole hash call.
    """

    @abstractmethod
    def should_hash_field(self, field: str, value: Any) -> bool:
        ...


class IncludableMap(ABC):
    """
    Optional capability of a record that owns mapping members: decide per
    entry of such a member whether it is hashed.
    """

    @abstractmethod
    def should_hash_map_entry(self, field: str, key: Any, value: Any) -> bool:
        ...
